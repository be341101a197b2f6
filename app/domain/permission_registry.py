"""Permission registry: the static catalog of permission keys.

Keys form a tree (module -> section -> action) and are dot-delimited, e.g.
``customers.detail.priceList.import``. The tree is used by the admin UI; the
flat keys are what role grants store. Built once at import, immutable at
runtime, never persisted.

Ancestor computation is syntactic (strip trailing segments) and does not
consult the catalog.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from typing import Any, Union

# A child is either a leaf segment or (segment, children).
_Node = Union[str, tuple[str, list["_Node"]]]

_TREE: list[tuple[str, list[_Node]]] = [
    ("dashboard", ["stats", "recentJobs", "revenue"]),
    (
        "dispatch",
        [
            "grid",
            "datePicker",
            (
                "assignment",
                [
                    "assignVehicle",
                    "assignDriver",
                    "assignRep",
                    "unassign",
                    "changeStatus",
                    "unlock48h",
                ],
            ),
            "exportButton",
        ],
    ),
    (
        "traffic-jobs",
        [
            (
                "online",
                [
                    "createJob",
                    (
                        "form",
                        [
                            "provider",
                            "agentRef",
                            "serviceType",
                            "dateTime",
                            "clientInfo",
                            "paxCount",
                            "route",
                            "flightInfo",
                            "extras",
                            "notes",
                            "printSign",
                        ],
                    ),
                    ("table", ["statusFilter"]),
                ],
            ),
            (
                "b2b",
                [
                    "createJob",
                    (
                        "form",
                        [
                            "customer",
                            "serviceType",
                            "dateTime",
                            "paxCount",
                            "route",
                            "flightInfo",
                            "meetingInfo",
                            "notes",
                        ],
                    ),
                    ("table", ["statusFilter"]),
                ],
            ),
        ],
    ),
    (
        "agents",
        [
            "addButton",
            ("table", ["editButton", "toggleStatus"]),
            (
                "form",
                [
                    "legalName",
                    "tradeName",
                    "taxId",
                    "contactInfo",
                    "currency",
                    "refPattern",
                    "creditLimit",
                    "creditDays",
                ],
            ),
        ],
    ),
    (
        "customers",
        [
            "addButton",
            ("table", ["editButton", "viewButton", "toggleStatus"]),
            (
                "form",
                [
                    "legalName",
                    "tradeName",
                    "taxId",
                    "contactInfo",
                    "currency",
                    "creditLimit",
                    "creditDays",
                ],
            ),
            (
                "detail",
                [
                    (
                        "priceList",
                        [
                            "addRoute",
                            "editPrice",
                            "deleteRoute",
                            "import",
                            "downloadTemplate",
                            "saveAll",
                        ],
                    ),
                    ("importTemplates", ["upload", "delete"]),
                ],
            ),
        ],
    ),
    (
        "finance",
        [
            (
                "invoices",
                [
                    "addButton",
                    (
                        "detail",
                        [
                            "editLines",
                            "addLine",
                            "deleteLine",
                            "postButton",
                            "cancelButton",
                            "applyVat",
                        ],
                    ),
                    "recordPayment",
                ],
            ),
            ("payments", ["addButton", "deleteButton"]),
            (
                "exports",
                [
                    "customers",
                    "suppliers",
                    "invoices",
                    "vendorBills",
                    "payments",
                    "journals",
                ],
            ),
        ],
    ),
    (
        "reports",
        [
            "dailyDispatch",
            "driverTrips",
            "agentStatement",
            "repFees",
            "revenue",
            "vehicleCompliance",
        ],
    ),
    (
        "vehicles",
        [
            ("types", ["addButton", "editButton"]),
            "addButton",
            ("table", ["editButton", "deleteButton", "toggleStatus"]),
            "import",
            "export",
            "downloadTemplate",
            (
                "form",
                [
                    "plateNumber",
                    "vehicleType",
                    "color",
                    "brand",
                    "model",
                    "makeYear",
                    "luggageCapacity",
                    "ownership",
                ],
            ),
        ],
    ),
    (
        "drivers",
        [
            "addButton",
            (
                "table",
                [
                    "editButton",
                    "deleteButton",
                    "toggleStatus",
                    "uploadAttachment",
                    "createAccount",
                    "resetPassword",
                ],
            ),
            "import",
            "export",
            "downloadTemplate",
            ("form", ["name", "mobile", "licenseNumber", "licenseExpiry"]),
        ],
    ),
    (
        "reps",
        [
            "addButton",
            (
                "table",
                [
                    "editButton",
                    "deleteButton",
                    "toggleStatus",
                    "uploadAttachment",
                    "createAccount",
                    "resetPassword",
                ],
            ),
            "import",
            "export",
            "downloadTemplate",
            ("form", ["name", "mobile", "feePerFlight"]),
        ],
    ),
    (
        "suppliers",
        [
            "addButton",
            ("table", ["editButton", "toggleStatus", "createAccount", "resetPassword"]),
            ("form", ["legalName", "tradeName", "taxId", "contactInfo"]),
        ],
    ),
    (
        "locations",
        [
            ("countries", ["addButton", "editButton"]),
            ("airports", ["addButton", "editButton", "deleteButton"]),
            ("cities", ["addButton", "editButton", "deleteButton"]),
            ("zones", ["addButton", "editButton", "deleteButton"]),
            ("hotels", ["addButton", "editButton", "deleteButton"]),
        ],
    ),
    ("company", ["editSettings", "uploadLogo", "uploadFavicon"]),
    (
        "users",
        [
            "addButton",
            ("table", ["editButton", "changeRole", "deactivate"]),
            ("roles", ["addButton", "editButton", "deleteButton", "editPermissions"]),
        ],
    ),
    ("guest-bookings", ["convert", "cancel"]),
    ("public-prices", ["bulk", "delete"]),
    ("job-locks", ["dispatcher", "driver", "rep", "supplier"]),
    ("activity-logs", ["export"]),
    (
        "whatsapp",
        [
            ("settings", ["editSettings"]),
            "logs",
            "testSend",
            "uploadMedia",
        ],
    ),
]


@dataclass(frozen=True)
class PermissionEntry:
    """Static metadata for one permission key."""

    key: str
    label_key: str
    parent_key: str | None
    children: tuple[str, ...] = ()


def _camel(segment: str) -> str:
    """traffic-jobs -> trafficJobs; other segments unchanged."""
    head, *rest = segment.split("-")
    return head + "".join(part[:1].upper() + part[1:] for part in rest)


def _label_key(key: str) -> str:
    return "permissions." + ".".join(_camel(s) for s in key.split("."))


def _build(
    nodes: Iterable[_Node], parent: str | None, out: dict[str, PermissionEntry]
) -> list[str]:
    """Flatten nodes depth-first into out; return the keys created at this level."""
    level: list[str] = []
    for node in nodes:
        segment, children = (node, []) if isinstance(node, str) else node
        key = f"{parent}.{segment}" if parent else segment
        if key in out:
            raise ValueError(f"Duplicate permission key in registry: {key}")
        # Reserve position so depth-first order is parent before children.
        out[key] = PermissionEntry(key, _label_key(key), parent)
        child_keys = _build(children, key, out)
        out[key] = PermissionEntry(key, _label_key(key), parent, tuple(child_keys))
        level.append(key)
    return level


_ENTRIES: dict[str, PermissionEntry] = {}
ROOT_KEYS: tuple[str, ...] = tuple(_build(_TREE, None, _ENTRIES))
_ALL_KEYS: frozenset[str] = frozenset(_ENTRIES)


def get_all_permission_keys() -> frozenset[str]:
    """Return every key defined in the catalog."""
    return _ALL_KEYS


def get_ancestor_keys(key: str) -> list[str]:
    """Return the proper ancestors of key, root first.

    ``agents.table.editButton`` -> ``["agents", "agents.table"]``; a root key
    (or any key without a dot) yields an empty list.
    """
    parts = key.split(".")
    return [".".join(parts[:i]) for i in range(1, len(parts))]


def is_valid_permission_key(key: str) -> bool:
    """Return True if key exists in the catalog."""
    return key in _ENTRIES


def get_entry(key: str) -> PermissionEntry | None:
    """Return registry metadata for key, or None if unknown."""
    return _ENTRIES.get(key)


def iter_entries() -> Iterator[PermissionEntry]:
    """Yield every entry in depth-first catalog order."""
    return iter(_ENTRIES.values())


def get_descendant_keys(key: str) -> list[str]:
    """Return every catalog key below key (depth-first); empty for leaf or unknown."""
    entry = _ENTRIES.get(key)
    if entry is None:
        return []
    result: list[str] = []
    for child in entry.children:
        result.append(child)
        result.extend(get_descendant_keys(child))
    return result


def find_invalid_keys(keys: Iterable[str]) -> list[str]:
    """Return keys not present in the catalog, in input order."""
    return [k for k in keys if k not in _ENTRIES]


def registry_tree() -> list[dict[str, Any]]:
    """Return the catalog as a JSON-serializable tree (key, label_key, children)."""

    def _node(key: str) -> dict[str, Any]:
        entry = _ENTRIES[key]
        node: dict[str, Any] = {"key": entry.key, "label_key": entry.label_key}
        if entry.children:
            node["children"] = [_node(c) for c in entry.children]
        return node

    return [_node(k) for k in ROOT_KEYS]
