from collections import Counter
from typing import Iterable

from .model import Document


def name_counts(documents: Iterable[Document]) -> Counter[str]:
    return Counter(doc.basename for doc in documents)


def unique_names(documents: Iterable[Document]) -> set[str]:
    """
    Short names held by exactly one document. Names shared by documents in
    different folders are left out so links to them stay folder-qualified.
    """
    return {name for name, count in name_counts(documents).items() if count == 1}


def ambiguous_names(documents: Iterable[Document]) -> set[str]:
    return {name for name, count in name_counts(documents).items() if count > 1}
