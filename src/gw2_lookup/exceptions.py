"""
Custom exceptions for GW2 name lookups.

Collaborator failures (API, wiki) and resolution failures are kept apart so
callers can tell "the wiki is down" from "that item has no ID".
"""


class GW2LookupError(Exception):
    pass


class APIError(GW2LookupError):
    pass


class WikiError(GW2LookupError):
    pass


class PageNotFoundError(WikiError):
    def __init__(self, title: str):
        self.title = title
        super().__init__(f"Wiki page '{title}' does not exist")


class ItemIDError(GW2LookupError):
    def __init__(self, title: str, message: str):
        self.title = title
        super().__init__(message)


class MissingInfoboxError(ItemIDError):
    def __init__(self, title: str):
        super().__init__(title, f"No infobox found on wiki page '{title}'")


class MissingIDFieldError(ItemIDError):
    def __init__(self, title: str):
        super().__init__(title, f"No item ID found in infobox of wiki page '{title}'")


class InvalidIDFieldError(ItemIDError):
    def __init__(self, title: str, value: str):
        self.value = value
        super().__init__(title, f"Invalid item ID '{value}' in infobox of wiki page '{title}'")


class NotFoundError(GW2LookupError):
    def __init__(self, name: str, reason: str | None = None):
        self.name = name
        self.reason = reason
        message = f"Nothing found for '{name}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
