from enum import Enum


class Entity(str, Enum):
    """Entities stored in the document store; the value is the table suffix."""

    MANUALS = "Manuals"
    NEWS = "News"
    CONTACTS = "Contacts"
    USERS = "Users"
    BRANDS = "Brands"
    DEPTS = "Depts"
    GROUPS = "Groups"
    EXTERNAL_LINKS = "ExternalLinks"


ENTITY_KEYS: dict[Entity, str] = {
    Entity.MANUALS: "manualId",
    Entity.NEWS: "newsId",
    Entity.CONTACTS: "contactId",
    Entity.USERS: "userId",
    Entity.BRANDS: "brandId",
    Entity.DEPTS: "deptId",
    Entity.GROUPS: "groupId",
    Entity.EXTERNAL_LINKS: "linkId",
}

# Reference lists without an explicit order sort last
DEFAULT_SORT_ORDER = 9999

ALL_SCOPE = "ALL"
