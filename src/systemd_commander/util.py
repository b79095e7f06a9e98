import json


def json_line(obj: dict) -> str:
    return json.dumps(obj, separators=(",", ":"))


def split_args(args: str) -> list[str]:
    """Split an argument string on single spaces.

    No quoting support: ``"a  b"`` yields ``["a", "", "b"]`` and ``""`` yields ``[""]``.
    """
    return args.split(" ")


def scan_lines(text: str) -> list[str]:
    """Split on ``\\n`` and drop one trailing ``\\r`` per line (CRLF output)."""
    return [line[:-1] if line.endswith("\r") else line for line in text.split("\n")]


def glob_pattern(text: str) -> str:
    # Empty text gives "**", which matches every unit
    return f"*{text}*"
