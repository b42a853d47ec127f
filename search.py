"""Search over hoarded commands"""

from typing import List, Sequence

from trove import CommandEntry


def namespaces(entries: Sequence[CommandEntry], default_namespace: str) -> List[str]:
    """Namespace tabs: the default namespace first, then the others in trove order"""
    tabs = [default_namespace]
    for entry in entries:
        if entry.namespace not in tabs:
            tabs.append(entry.namespace)
    return tabs


def matches(entry: CommandEntry, query: str) -> bool:
    """Check whether a lowercased query appears in the name, a tag or the description"""
    if query in entry.name.lower():
        return True
    if any(query in tag.lower() for tag in entry.tags):
        return True
    return query in entry.description.lower()


def filter_entries(entries: Sequence[CommandEntry], namespace: str, query: str) -> List[CommandEntry]:
    """Entries of a namespace matching the query.

    Names starting with the query come first. Otherwise the trove order is kept.
    """
    in_namespace = [entry for entry in entries if entry.namespace == namespace]
    if not query:
        return in_namespace

    needle = query.lower()
    found = [entry for entry in in_namespace if matches(entry, needle)]
    # sorted() is stable, so each tier keeps trove order
    return sorted(found, key=lambda entry: not entry.name.lower().startswith(needle))
