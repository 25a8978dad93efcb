"""
Ordered collection of every document read during one run.
"""
from collections.abc import Iterator

from .source_document import SourceDocument


class DocumentSet:
    """
    Documents in the order they were encountered: book file inputs first,
    then command-line inputs, then standard input, interleaved exactly as the
    arguments appeared. Nothing is reordered, merged or deduplicated.
    """

    def __init__(self):
        self._documents: list[SourceDocument] = []


    def append(self, document: SourceDocument):
        self._documents.append(document)


    @property
    def head(self) -> SourceDocument | None:
        return self._documents[0] if self._documents else None


    @property
    def tail(self) -> SourceDocument | None:
        return self._documents[-1] if self._documents else None


    def _index(self, document: SourceDocument) -> int:
        for index, candidate in enumerate(self._documents):
            if candidate is document:
                return index
        raise ValueError("Document is not part of this set")


    def previous(self, document: SourceDocument) -> SourceDocument | None:
        index = self._index(document)
        return self._documents[index - 1] if index > 0 else None


    def next(self, document: SourceDocument) -> SourceDocument | None:
        index = self._index(document)
        return self._documents[index + 1] if index + 1 < len(self._documents) else None


    def origins(self) -> list[str]:
        return [doc.origin for doc in self._documents]


    def __iter__(self) -> Iterator[SourceDocument]:
        return iter(self._documents)


    def __len__(self) -> int:
        return len(self._documents)


    def __bool__(self) -> bool:
        return bool(self._documents)
