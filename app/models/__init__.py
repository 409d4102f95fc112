# Models package
from app.models.user import User, UserRole
from app.models.category import Category
from app.models.brand import Brand
from app.models.product_model import ProductModel
from app.models.supplier import Supplier
from app.models.customer import Customer
from app.models.address import Address
from app.models.item import InventoryItem, ItemType, ItemOwner, ItemStatus
from app.models.sale import Sale, SaleStatus
from app.models.borrowing import Borrowing, BorrowingOnItem, BorrowingStatus
from app.models.assignment import AssetAssignment, AssetAssignmentOnItem, AssignmentStatus
from app.models.repair import Repair, RepairOnItem, RepairStatus, RepairOutcome
from app.models.event_log import EventLog, EventType
from app.models.company_profile import CompanyProfile
