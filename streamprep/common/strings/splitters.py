from typing import List

def csv_to_list(v: str | List[str] | None) -> List[str]:
    if v is None:
        return []
    if isinstance(v, (list, tuple)):
        return [str(s).strip() for s in v if s is not None and str(s).strip()]
    return [s.strip() for s in str(v).split(",") if s.strip()]


def split_dimensions(v: str) -> tuple[str, str]:
    """Split a "WxH" string into its two raw axis strings."""
    parts = str(v).strip().lower().split("x")
    if len(parts) != 2 or not parts[0] or not parts[1]:
        raise ValueError(f"expected WxH dimensions, got {v!r}")
    return parts[0].strip(), parts[1].strip()
