"""
Backend field names, exactly as they appear in the object store.

Outgoing payloads and constraint keys must use these spellings. Incoming bodies
are normalized to snake_case by the decoder, so models never see them.
"""

from __future__ import annotations

ID = "_id"
CREATED_DATE = "Created Date"
MODIFIED_DATE = "Modified Date"
DELETED_AT = "deletedAt"


class Project:
    ADDRESS = "Address"
    ALL_DAY = "All Day"
    CLIENT = "Client"
    COMPANY = "Company"
    COMPLETION = "Completion"
    DESCRIPTION = "Description"
    PROJECT_NAME = "Project Name"
    START_DATE = "Start Date"
    STATUS = "Status"
    TEAM_MEMBERS = "Team Members"
    TEAM_NOTES = "Team Notes"


class ProjectStatus:
    RFQ = "RFQ"
    ESTIMATED = "Estimated"
    ACCEPTED = "Accepted"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    CLOSED = "Closed"


class Task:
    PROJECT_ID = "projectID"
    COMPANY_ID = "companyId"
    TYPE = "type"
    STATUS = "status"
    TASK_COLOR = "taskColor"
    TASK_NOTES = "taskNotes"
    TEAM_MEMBERS = "Team Members"
    TASK_INDEX = "taskIndex"
    CALENDAR_EVENT_ID = "calendarEventId"


class TaskStatus:
    COMPANY = "Company"
    INDEX = "Index"


class TaskType:
    COMPANY = "Company"
    DISPLAY = "Display"
    COLOR = "Color"
    ICON = "Icon"
    IS_DEFAULT = "isDefault"


class CalendarEvent:
    COLOR = "Color"
    COMPANY = "Company"
    PROJECT = "Project"
    TASK = "Task"
    DURATION = "Duration"
    END_DATE = "End Date"
    START_DATE = "Start Date"
    TEAM_MEMBERS = "Team Members"
    TITLE = "Title"
    TYPE = "Type"


class Client:
    ADDRESS = "address"
    EMAIL_ADDRESS = "emailAddress"
    NAME = "name"
    PHONE_NUMBER = "phoneNumber"
    PARENT_COMPANY = "parentCompany"
    STATUS = "status"
    IS_COMPANY = "isCompany"


class SubClient:
    PARENT_CLIENT = "Parent Client"
    NAME = "Name"
    TITLE = "Title"
    EMAIL_ADDRESS = "Email Address"
    PHONE_NUMBER = "Phone Number"
    ADDRESS = "Address"


class Company:
    COMPANY_NAME = "Company Name"
    COMPANY_ID = "companyID"


class User:
    COMPANY = "Company"
    EMPLOYEE_TYPE = "Employee Type"
    NAME_FIRST = "Name First"
    NAME_LAST = "Name Last"
    USER_TYPE = "User Type"
    EMAIL = "email"


class InventoryUnit:
    DISPLAY = "display"
    COMPANY = "company"
    IS_DEFAULT = "isDefault"
    SORT_ORDER = "sortOrder"


class InventoryItem:
    NAME = "name"
    DESCRIPTION = "description"
    QUANTITY = "quantity"
    UNIT = "unit"
    TAGS = "tags"
    COMPANY = "company"
    SKU = "sku"
    NOTES = "notes"
    IMAGE_URL = "imageUrl"
    WARNING_THRESHOLD = "warningThreshold"
    CRITICAL_THRESHOLD = "criticalThreshold"


class InventoryTag:
    NAME = "name"
    COMPANY = "company"
    WARNING_THRESHOLD = "warningThreshold"
    CRITICAL_THRESHOLD = "criticalThreshold"


class InventorySnapshot:
    COMPANY = "company"
    CREATED_AT = "createdAt"
    CREATED_BY = "createdBy"
    IS_AUTOMATIC = "isAutomatic"
    ITEM_COUNT = "itemCount"
    NOTES = "notes"


class InventorySnapshotItem:
    SNAPSHOT = "snapshot"
    ORIGINAL_ITEM_ID = "originalItemId"
    NAME = "name"
    QUANTITY = "quantity"
    UNIT_DISPLAY = "unitDisplay"
    SKU = "sku"


class AppMessage:
    ACTIVE = "active"
