import random
import re
from collections.abc import Collection
from datetime import date

from publication_watch.constants import (
    PUBLICATION_ID_ALPHABET,
    PUBLICATION_ID_PREFIX,
    PUBLICATION_ID_SUFFIX_LENGTH,
)
from publication_watch.models import PublicationRecord

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def normalize_title(title: str) -> str:
    """Lowercase and drop everything that is not an ASCII letter or digit."""
    return _NON_ALNUM.sub("", title.lower()).strip()


def dedup_key(record: PublicationRecord) -> str:
    """Key used to collapse duplicates within one fetch cycle: doi, then pmid, then title."""
    return record.doi or record.pmid or normalize_title(record.title)


def generate_publication_id(
    year: int | None,
    existing_ids: Collection[str] = (),
    rng: random.Random | None = None,
) -> str:
    """Return an id of the form ``pub-<year>-<suffix>`` not already in ``existing_ids``.

    The year falls back to the current calendar year.
    """
    rng = rng or random.Random()
    year = year or date.today().year
    while True:
        suffix = "".join(
            rng.choices(PUBLICATION_ID_ALPHABET, k=PUBLICATION_ID_SUFFIX_LENGTH)
        )
        candidate = f"{PUBLICATION_ID_PREFIX}-{year}-{suffix}"
        if candidate not in existing_ids:
            return candidate
