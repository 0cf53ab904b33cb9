from enum import Enum


class Lifetime(Enum):
    """How long a resolved service lives inside one :class:`Container`."""

    SINGLETON = "singleton"  # one instance per container
    TRANSIENT = "transient"  # a new instance per resolve, e.g. one zip writer per archive
