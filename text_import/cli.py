from __future__ import annotations

import argparse
import sys
from typing import Optional

import pandas as pd

from text_import.country_text import COUNTRY_FORMAT_HINT, parse_country_text
from text_import.product_text import PRODUCT_FORMAT_HINT, parse_email_text


_PARSERS = {
    "products": (parse_email_text, PRODUCT_FORMAT_HINT),
    "countries": (parse_country_text, COUNTRY_FORMAT_HINT),
}


def _read_text(path: str) -> str:
    if not path or path == "-":
        return sys.stdin.read()
    with open(path, encoding="utf-8-sig") as fh:
        return fh.read()


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Parse pasted buyer text into product or country candidates.")
    parser.add_argument("kind", choices=sorted(_PARSERS), help="Which parser to run.")
    parser.add_argument(
        "--input",
        default="-",
        help="Text file with the pasted email (default: stdin).",
    )
    parser.add_argument(
        "--output",
        default="",
        help="Write candidates to this CSV path instead of stdout.",
    )
    args = parser.parse_args(argv)

    parse, hint = _PARSERS[args.kind]
    candidates = parse(_read_text(args.input))
    if not candidates:
        print(f"Nothing parsed. Expected format:\n{hint}", file=sys.stderr)
        return 1

    df = pd.DataFrame([c.to_dict() for c in candidates])
    output_path = args.output.strip()
    if output_path:
        df.to_csv(output_path, index=False)
        print(f"candidates={len(df)} output={output_path}", file=sys.stderr)
    else:
        df.to_csv(sys.stdout, index=False)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
