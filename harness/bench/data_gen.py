import secrets
import string
from datetime import datetime, timedelta, timezone
from functools import partial
from typing import Any, Callable, Dict, List, Optional

from faker import Faker

from harness.bench.errors import InvalidSeed, UnknownKind

_ALNUM = string.ascii_letters + string.digits
_RECENT_DAYS = 30

STATUSES = ("active", "inactive", "pending")
PRIORITIES = ("low", "medium", "high")
DEPARTMENTS = (
    "Books", "Clothing", "Electronics", "Garden", "Grocery",
    "Health", "Home", "Music", "Sports", "Toys",
)

INVALID_SPECIAL_CHARACTERS = "!@#$%^&*()_+-=[]{}|;':\",./<>?"
INVALID_SQL_INJECTION = "'; DROP TABLE users; --"
INVALID_XSS_PAYLOAD = "<script>alert('xss')</script>"


def coerce_seed(value: Any) -> int:
    """Return ``value`` as an int seed or raise :class:`InvalidSeed`."""
    if isinstance(value, bool):
        raise InvalidSeed(f"Seed must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except (TypeError, ValueError) as exc:
        raise InvalidSeed(f"Seed must be an integer, got {value!r}") from exc


def random_seed() -> int:
    return secrets.randbelow(2**31 - 1) + 1


def _recent(gen: "DataGenerator") -> datetime:
    offset = gen.fake.random_int(min=0, max=_RECENT_DAYS * 86_400_000)
    return gen.anchor - timedelta(milliseconds=offset)


def _iso_datetime(gen: "DataGenerator") -> str:
    return _recent(gen).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _timestamp_ms(gen: "DataGenerator") -> int:
    return int(_recent(gen).timestamp() * 1000)


def _geo(gen: "DataGenerator") -> Dict[str, str]:
    return {"lat": str(gen.fake.latitude()), "lng": str(gen.fake.longitude())}


def _address(gen: "DataGenerator") -> Dict[str, Any]:
    f = gen.fake
    return {
        "street": f.street_address(),
        "suite": f.secondary_address(),
        "city": f.city(),
        "zipcode": f.postcode(),
        "geo": _geo(gen),
    }


def _company_profile(gen: "DataGenerator") -> Dict[str, str]:
    f = gen.fake
    return {"name": f.company(), "catchPhrase": f.catch_phrase(), "bs": f.bs()}


# kind -> producer(gen); every entry must take the generator as its only argument
_PRODUCERS: Dict[str, Callable[["DataGenerator"], Any]] = {
    # text
    "word": lambda g: g.fake.word(),
    "words": lambda g: " ".join(g.fake.words(nb=3)),
    "sentence": lambda g: g.fake.sentence(),
    "paragraph": lambda g: g.fake.paragraph(),
    "paragraphs": lambda g: "\n".join(g.fake.paragraphs(nb=2)),
    # numbers
    "number": lambda g: g.fake.random_int(min=1, max=1000),
    "id": lambda g: g.fake.random_int(min=1, max=999_999),
    # identity
    "username": lambda g: g.fake.user_name().lower(),
    "password": lambda g: g.fake.password(length=12),
    "email": lambda g: g.fake.email().lower(),
    "first_name": lambda g: g.fake.first_name(),
    "last_name": lambda g: g.fake.last_name(),
    "full_name": lambda g: g.fake.name(),
    "phone": lambda g: g.fake.phone_number(),
    # address
    "street_address": lambda g: g.fake.street_address(),
    "secondary_address": lambda g: g.fake.secondary_address(),
    "city": lambda g: g.fake.city(),
    "state": lambda g: g.fake.state(),
    "country": lambda g: g.fake.country(),
    "zipcode": lambda g: g.fake.postcode(),
    "latitude": lambda g: str(g.fake.latitude()),
    "longitude": lambda g: str(g.fake.longitude()),
    "geo": _geo,
    "address": _address,
    # date and time
    "date": lambda g: _recent(g).date().isoformat(),
    "datetime": _iso_datetime,
    "timestamp": _timestamp_ms,
    # company
    "company": lambda g: g.fake.company(),
    "company_profile": _company_profile,
    "job": lambda g: g.fake.job(),
    "department": lambda g: g.fake.random_element(elements=DEPARTMENTS),
    # internet
    "url": lambda g: g.fake.url(),
    "domain": lambda g: g.fake.domain_name(),
    "ip": lambda g: g.fake.ipv4(),
    "uuid": lambda g: g.fake.uuid4(),
    "user_agent": lambda g: g.fake.user_agent(),
    "semver": lambda g: "{}.{}.{}".format(
        g.fake.random_int(0, 9), g.fake.random_int(0, 20), g.fake.random_int(0, 50)
    ),
    # financial
    "price": lambda g: "{:.2f}".format(g.fake.random_int(min=100, max=100_000) / 100),
    "currency": lambda g: g.fake.currency_code(),
    "account": lambda g: g.fake.numerify("########"),
    # boolean and choices
    "boolean": lambda g: g.fake.boolean(),
    "status": lambda g: g.fake.random_element(elements=STATUSES),
    "priority": lambda g: g.fake.random_element(elements=PRIORITIES),
    # api tokens
    "token": lambda g: g.alphanumeric(32),
    "key": lambda g: g.alphanumeric(16),
    "code": lambda g: g.alphanumeric(8).upper(),
}

KINDS = frozenset(_PRODUCERS)


class DataGenerator:
    """Seedable registry of value producers backed by one Faker instance.

    Dates are drawn from the thirty days before ``anchor`` (captured at
    construction) so a seeded generator repeats its dates inside a process.
    """

    def __init__(self, seed: Optional[int] = None, anchor: Optional[datetime] = None) -> None:
        self.fake = Faker()
        self.anchor = anchor or datetime.now(timezone.utc)
        self.seed_value: Optional[int] = None
        if seed is not None:
            self.seed(seed)

    def seed(self, value: Any) -> int:
        seed_value = coerce_seed(value)
        self.fake.seed_instance(seed_value)
        self.seed_value = seed_value
        return seed_value

    def producer(self, kind: str) -> Callable[[], Any]:
        try:
            fn = _PRODUCERS[kind]
        except KeyError:
            raise UnknownKind(f"Unknown generator kind: {kind!r}") from None
        return partial(fn, self)

    def generate(self, kind: str) -> Any:
        return self.producer(kind)()

    def int_between(self, low: int, high: int) -> int:
        return self.fake.random_int(min=low, max=high)

    def alphanumeric(self, length: int) -> str:
        return self.fake.lexify("?" * length, letters=_ALNUM)

    # -- fixture bundles ---------------------------------------------------

    def user(self) -> Dict[str, Any]:
        return {
            "name": self.generate("full_name"),
            "username": self.generate("username"),
            "email": self.generate("email"),
            "phone": self.generate("phone"),
            "website": self.generate("domain"),
            "address": self.generate("address"),
            "company": self.generate("company_profile"),
        }

    def post(self) -> Dict[str, Any]:
        return {
            "title": self.generate("sentence"),
            "body": self.generate("paragraphs"),
            "userId": self.int_between(1, 10),
        }

    def comment(self) -> Dict[str, Any]:
        return {
            "postId": self.int_between(1, 100),
            "name": self.generate("full_name"),
            "email": self.generate("email"),
            "body": self.generate("paragraph"),
        }

    def todo(self) -> Dict[str, Any]:
        return {
            "title": self.generate("sentence"),
            "completed": self.generate("boolean"),
            "userId": self.int_between(1, 10),
        }

    def album(self) -> Dict[str, Any]:
        return {"title": self.generate("words"), "userId": self.int_between(1, 10)}

    def photo(self) -> Dict[str, Any]:
        width = self.int_between(400, 800)
        height = self.int_between(300, 600)
        return {
            "albumId": self.int_between(1, 50),
            "title": " ".join(self.fake.words(nb=2)),
            "url": f"https://picsum.photos/{width}/{height}",
            "thumbnailUrl": "https://picsum.photos/150/150",
        }

    def login_credentials(self) -> Dict[str, str]:
        return {"username": self.generate("username"), "password": self.generate("password")}

    def auth_payload(self) -> Dict[str, str]:
        return {
            "username": self.generate("username"),
            "password": "password123",
            "email": self.generate("email"),
            "firstName": self.generate("first_name"),
            "lastName": self.generate("last_name"),
        }

    def headers(self) -> Dict[str, str]:
        return {
            "X-Request-ID": self.generate("uuid"),
            "X-Client-Version": self.generate("semver"),
            "X-Session-ID": self.alphanumeric(16),
            "User-Agent": self.generate("user_agent"),
            "X-Correlation-ID": self.generate("uuid"),
        }

    def invalid_data(self) -> Dict[str, Any]:
        return {
            "invalidEmail": self.generate("word"),
            "invalidPhone": " ".join(self.fake.words(nb=2)),
            "invalidURL": "not-a-url",
            "emptyString": "",
            "nullValue": None,
            "longString": "\n".join(self.fake.paragraphs(nb=10)),
            "specialCharacters": INVALID_SPECIAL_CHARACTERS,
            "sqlInjection": INVALID_SQL_INJECTION,
            "xssPayload": INVALID_XSS_PAYLOAD,
        }

    def scenario_bundle(self) -> Dict[str, Any]:
        return {
            "validUser": self.user(),
            "validPost": self.post(),
            "validComment": self.comment(),
            "validTodo": self.todo(),
            "validAlbum": self.album(),
            "validPhoto": self.photo(),
            "loginCredentials": self.login_credentials(),
            "authPayload": self.auth_payload(),
            "customHeaders": self.headers(),
            "invalidData": self.invalid_data(),
        }

    def bulk(self, kind: str, count: int = 5) -> List[Dict[str, Any]]:
        builders = {
            "user": self.user, "users": self.user,
            "post": self.post, "posts": self.post,
            "comment": self.comment, "comments": self.comment,
            "todo": self.todo, "todos": self.todo,
        }
        build = builders.get(kind.lower(), self.user)
        return [build() for _ in range(count)]
