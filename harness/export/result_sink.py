import json
import os
from typing import Any, Dict, Optional


class ResultSink:
    def write(self, report: Dict[str, Any], json_path: Optional[str] = None, console: bool = False) -> None:
        if console is True:
            print(json.dumps(report, indent=2, default=str))

        if json_path:
            os.makedirs(os.path.dirname(json_path) or ".", exist_ok=True)
            with open(json_path, "w", encoding="utf-8") as f:
                json.dump(report, f, indent=2, default=str)
