# warranty_hub/domain/serials.py
import re
from typing import Iterable, List

from warranty_hub.domain.errors import InvalidFormat, DuplicateInBatch

SERIAL_PATTERN = re.compile(r"^[A-Z0-9]+$")
_CSV_SPLIT = re.compile(r"[\n\r,;]+")


def normalize_serial(raw: str) -> str:
    return raw.strip().upper()


def is_valid_serial(code: str) -> bool:
    return bool(SERIAL_PATTERN.match(code))


def normalize_batch(raw_codes: Iterable[str]) -> List[str]:
    """
    Normalizuje partię kodów i sprawdza ją samą w sobie.

    InvalidFormat wymienia wszystkie kody spoza ``[A-Z0-9]+``,
    DuplicateInBatch kody powtarzające się po normalizacji ("abc1" i " ABC1 ").
    Kolejność wejścia jest zachowana.
    """
    codes = [normalize_serial(raw) for raw in raw_codes]

    invalid = [c for c in codes if not is_valid_serial(c)]
    if invalid:
        raise InvalidFormat(f"Invalid serial format: {', '.join(invalid)}", codes=invalid)

    seen = set()
    duplicates = []
    for c in codes:
        if c in seen and c not in duplicates:
            duplicates.append(c)
        seen.add(c)
    if duplicates:
        raise DuplicateInBatch(f"Duplicate serials in batch: {', '.join(duplicates)}", codes=duplicates)

    return codes


def split_csv(data: str) -> List[str]:
    """Dzieli wklejony tekst (CSV, średniki, nowe linie) na surowe kody."""
    return [part.strip() for part in _CSV_SPLIT.split(data) if part.strip()]
