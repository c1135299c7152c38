import argparse
import json
import sys
from pathlib import Path

from harness.bench.data_gen import DataGenerator, random_seed
from harness.bench.errors import InvalidSeed
from harness.bench.materializer import BodyMaterializer


def _read_template(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    p = Path(source)
    if not p.exists():
        raise FileNotFoundError(f"Template not found: {p}")
    return p.read_text(encoding="utf-8")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Materialize a request-body template with generated test data."
    )
    parser.add_argument("template", help="template file, or - for stdin")
    parser.add_argument("--seed", help="seed for reproducible output (random when omitted)")
    parser.add_argument(
        "--field-overrides",
        action=argparse.BooleanOptionalAction,
        default=True,
        help='replace "<field>": "random" sentinels (default: on)',
    )
    parser.add_argument("--output", help="write the body here instead of stdout")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    generator = DataGenerator()
    try:
        seed = generator.seed(args.seed if args.seed is not None else random_seed())
    except InvalidSeed as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    template = _read_template(args.template)
    result = BodyMaterializer(generator, field_overrides=args.field_overrides).materialize(template)
    if result.ok:
        output = json.dumps(result.body, indent=2, ensure_ascii=False)
    else:
        output = result.text or ""

    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(output + "\n", encoding="utf-8")
        print(f"Created: {out}", file=sys.stderr)
    else:
        print(output)
    print(f"seed: {seed}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
