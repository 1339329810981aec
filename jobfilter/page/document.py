"""In-memory model of a recruiting page.

A Page wraps a parsed HTML tree and plays the part of the browser for the
filter engine: host code (a browser bridge, the CLI poller, tests) changes
the tree through the Page, and the Page reports those changes to mutation
observers and dispatches click / navigation events to listeners. Filter code
only reads the tree and writes the visibility toggle.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from bs4 import BeautifulSoup
from bs4.element import PageElement, Tag

from jobfilter.logging import get_logger

from .exceptions import PageError

logger = get_logger(__name__, component="page")

HTML_PARSER = "html.parser"

CHILD_LIST = "childList"
ATTRIBUTES = "attributes"

CLICK = "click"
NAVIGATE = "navigate"


@dataclass
class MutationRecord:
    """One structural or attribute change under an observed element.

    Attributes:
        type: CHILD_LIST or ATTRIBUTES
        target: Element whose children or attribute changed
        added_nodes: Nodes inserted under target
        removed_nodes: Nodes removed from target
        attribute_name: Changed attribute (ATTRIBUTES records only)
    """

    type: str
    target: Tag
    added_nodes: List[PageElement] = field(default_factory=list)
    removed_nodes: List[PageElement] = field(default_factory=list)
    attribute_name: Optional[str] = None


@dataclass
class PageEvent:
    """Event dispatched to page listeners (click or navigation)."""

    type: str
    target: Optional[Tag] = None
    url: Optional[str] = None


MutationCallback = Callable[[List[MutationRecord]], None]
EventListener = Callable[[PageEvent], None]


def contains(ancestor: PageElement, node: PageElement) -> bool:
    """Whether ``node`` is ``ancestor`` or lies inside it (identity, not equality)."""
    if node is ancestor:
        return True
    return any(parent is ancestor for parent in node.parents)


class MutationObserver:
    """Observes one element's subtree, like the DOM MutationObserver.

    Records are delivered in one batch per host change. ``observe`` on an
    already-observing instance moves it to the new target.
    """

    def __init__(self, page: "Page", callback: MutationCallback, attributes: bool = False):
        self._page = page
        self._callback = callback
        self._attributes = attributes
        self.target: Optional[Tag] = None

    @property
    def is_connected(self) -> bool:
        return self.target is not None

    def observe(self, target: Tag) -> None:
        if target is None:
            raise PageError("Cannot observe a missing element")
        self.target = target
        self._page._register(self)

    def disconnect(self) -> None:
        self.target = None
        self._page._unregister(self)

    def _deliver(self, records: List[MutationRecord]) -> None:
        if self.target is None:
            return
        relevant = [
            r for r in records
            if contains(self.target, r.target)
            and (r.type == CHILD_LIST or self._attributes)
        ]
        if relevant:
            self._callback(relevant)


class Page:
    """Parsed HTML document with mutation and event dispatch.

    Attributes:
        soup: BeautifulSoup tree of the page
        url: Current page URL, None when the page was loaded without one
    """

    def __init__(self, html: str, url: Optional[str] = None):
        self.soup = BeautifulSoup(html, HTML_PARSER)
        self.url = url
        self._observers: List[MutationObserver] = []
        self._capture: Dict[str, List[EventListener]] = defaultdict(list)
        self._bubble: Dict[str, List[EventListener]] = defaultdict(list)

    @classmethod
    def from_file(cls, path: Union[str, Path], url: Optional[str] = None) -> "Page":
        """Load a saved page from disk."""
        try:
            html = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise PageError(f"Failed to read page {path}: {e}") from e
        return cls(html, url=url)

    @property
    def body(self) -> Tag:
        """The <body> element, or the document root for fragments."""
        return self.soup.body or self.soup

    # -- queries -----------------------------------------------------------

    def select(self, selector: str, root: Optional[Tag] = None) -> List[Tag]:
        return (root or self.soup).select(selector)

    def select_one(self, selector: str, root: Optional[Tag] = None) -> Optional[Tag]:
        return (root or self.soup).select_one(selector)

    # -- observers and listeners -------------------------------------------

    def observer(self, callback: MutationCallback, attributes: bool = False) -> MutationObserver:
        """Create a (not yet observing) MutationObserver bound to this page."""
        return MutationObserver(self, callback, attributes=attributes)

    def add_event_listener(
        self, event_type: str, listener: EventListener, capture: bool = False
    ) -> Callable[[], None]:
        """Register a document-level listener.

        Returns:
            Callable that removes the listener again
        """
        registry = self._capture if capture else self._bubble
        registry[event_type].append(listener)

        def remove() -> None:
            if listener in registry[event_type]:
                registry[event_type].remove(listener)

        return remove

    def _register(self, observer: MutationObserver) -> None:
        if observer not in self._observers:
            self._observers.append(observer)

    def _unregister(self, observer: MutationObserver) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    @property
    def observer_count(self) -> int:
        return len(self._observers)

    # -- host-side changes -------------------------------------------------

    def append_html(self, parent: Tag, html: str) -> List[PageElement]:
        """Parse ``html`` and append the resulting nodes to ``parent``."""
        fragment = BeautifulSoup(html, HTML_PARSER)
        added = []
        for node in list(fragment.contents):
            parent.append(node.extract())
            added.append(node)
        if added:
            self._notify([MutationRecord(CHILD_LIST, parent, added_nodes=added)])
        return added

    def remove(self, node: PageElement) -> None:
        """Detach ``node`` from the tree."""
        parent = node.parent
        if parent is None:
            return
        node.extract()
        self._notify([MutationRecord(CHILD_LIST, parent, removed_nodes=[node])])

    def replace_children(self, parent: Tag, html: str) -> List[PageElement]:
        """Replace every child of ``parent`` with the nodes parsed from ``html``."""
        removed = [child.extract() for child in list(parent.contents)]
        fragment = BeautifulSoup(html, HTML_PARSER)
        added = []
        for node in list(fragment.contents):
            parent.append(node.extract())
            added.append(node)
        if removed or added:
            self._notify(
                [MutationRecord(CHILD_LIST, parent, added_nodes=added, removed_nodes=removed)]
            )
        return added

    def set_attribute(self, node: Tag, name: str, value: Optional[Union[str, List[str]]]) -> None:
        """Set (or with None, remove) an attribute the way page scripts do."""
        if value is None:
            node.attrs.pop(name, None)
        else:
            node[name] = value
        self._notify([MutationRecord(ATTRIBUTES, node, attribute_name=name)])

    def click(self, node: Tag) -> PageEvent:
        """Dispatch a click on ``node``: capture listeners first, then bubble."""
        event = PageEvent(CLICK, target=node, url=self.url)
        self._dispatch(event)
        return event

    def navigate(self, url: str) -> PageEvent:
        """Change the URL without a reload (SPA history / hash navigation)."""
        self.url = url
        event = PageEvent(NAVIGATE, url=url)
        self._dispatch(event)
        return event

    def to_html(self) -> str:
        return str(self.soup)

    # -- dispatch ----------------------------------------------------------

    def _notify(self, records: List[MutationRecord]) -> None:
        for observer in list(self._observers):
            observer._deliver(records)

    def _dispatch(self, event: PageEvent) -> None:
        listeners = list(self._capture[event.type]) + list(self._bubble[event.type])
        for listener in listeners:
            try:
                listener(event)
            except Exception as e:
                # A failing listener must not stop the page's own handling
                logger.error(
                    f"Page listener failed: {e}",
                    extra={"event": "page.listener.failed", "event_type": event.type},
                    exc_info=True,
                )
