"""Exceptions raised by the ingestion core."""


class UutisvahtiError(Exception):
    """Base class for all application errors."""


class StorageError(UutisvahtiError):
    """A database operation failed."""


class DuplicateArticleError(StorageError):
    """An article with the same URL is already stored."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Article already exists: {url}")
        self.url = url


class ArticleInsertError(StorageError):
    """Storage rejected an article insert."""
