"""
Import every model so Base.metadata knows all tables (create_all, Alembic).
"""

from renoplan.db.boms.model import BillOfMaterial, BOMItem, ProductMatch
from renoplan.db.conversations.model import Conversation, Message
from renoplan.db.projects.model import Project
from renoplan.db.user_roles.model import UserRole
from renoplan.db.vendors.model import Vendor

__all__ = [
    "BillOfMaterial",
    "BOMItem",
    "Conversation",
    "Message",
    "Project",
    "ProductMatch",
    "UserRole",
    "Vendor",
]
