from enum import Enum, unique


@unique
class DeploymentState(str, Enum):
    """Deployment lifecycle states reported by the API"""

    INITIALIZING = "INITIALIZING"
    BUILDING = "BUILDING"
    ERROR = "ERROR"
    READY = "READY"
    QUEUED = "QUEUED"
    CANCELED = "CANCELED"
    UNKNOWN = "UNKNOWN"

    def __str__(self):
        return self.value

    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


@unique
class LinkStatus(str, Enum):
    LINKED = "linked"
    NOT_LINKED = "not_linked"
    ERROR = "error"

    def __str__(self):
        return self.value


@unique
class OrgType(str, Enum):
    USER = "user"
    TEAM = "team"

    def __str__(self):
        return self.value
