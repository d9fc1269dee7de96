"""
Permission catalog

Permission names are plain strings carried by roles. The catalog below is
seeded at bootstrap and is the set the routers check against.
"""

# Users
READ_USERS = "READ_USERS"
VIEW_USERS = "VIEW_USERS"
CREATE_USERS = "CREATE_USERS"
EDIT_USERS = "EDIT_USERS"
DELETE_USERS = "DELETE_USERS"

# Roles
READ_ROLES = "READ_ROLES"
VIEW_ROLE = "VIEW_ROLE"
CREATE_ROLE = "CREATE_ROLE"
EDIT_ROLE = "EDIT_ROLE"
DELETE_ROLE = "DELETE_ROLE"
ASSIGN_ROLES = "ASSIGN_ROLES"
REVOKE_ROLES = "REVOKE_ROLES"

# Permissions
READ_PERMISSIONS = "READ_PERMISSIONS"
MANAGE_PERMISSIONS = "MANAGE_PERMISSIONS"

# Companies
READ_COMPANIES = "READ_COMPANIES"
VIEW_COMPANY = "VIEW_COMPANY"
CREATE_COMPANY = "CREATE_COMPANY"
EDIT_COMPANY = "EDIT_COMPANY"
DELETE_COMPANY = "DELETE_COMPANY"

# Employees
READ_EMPLOYEES = "READ_EMPLOYEES"
VIEW_EMPLOYEE = "VIEW_EMPLOYEE"
CREATE_EMPLOYEE = "CREATE_EMPLOYEE"
EDIT_EMPLOYEE = "EDIT_EMPLOYEE"
DELETE_EMPLOYEE = "DELETE_EMPLOYEE"

# Employee contracts
READ_EMPLOYEE_CONTRACTS = "READ_EMPLOYEE_CONTRACTS"
VIEW_EMPLOYEE_CONTRACT = "VIEW_EMPLOYEE_CONTRACT"
CREATE_EMPLOYEE_CONTRACT = "CREATE_EMPLOYEE_CONTRACT"
EDIT_EMPLOYEE_CONTRACT = "EDIT_EMPLOYEE_CONTRACT"
DELETE_EMPLOYEE_CONTRACT = "DELETE_EMPLOYEE_CONTRACT"

# Employee salaries
READ_EMPLOYEE_SALARIES = "READ_EMPLOYEE_SALARIES"
VIEW_EMPLOYEE_SALARY = "VIEW_EMPLOYEE_SALARY"
CREATE_EMPLOYEE_SALARY = "CREATE_EMPLOYEE_SALARY"
EDIT_EMPLOYEE_SALARY = "EDIT_EMPLOYEE_SALARY"
DELETE_EMPLOYEE_SALARY = "DELETE_EMPLOYEE_SALARY"

# Countries
READ_COUNTRIES = "READ_COUNTRIES"
VIEW_COUNTRY = "VIEW_COUNTRY"
CREATE_COUNTRY = "CREATE_COUNTRY"
EDIT_COUNTRY = "EDIT_COUNTRY"
DELETE_COUNTRY = "DELETE_COUNTRY"

# Cities
READ_CITIES = "READ_CITIES"
VIEW_CITY = "VIEW_CITY"
CREATE_CITY = "CREATE_CITY"
EDIT_CITY = "EDIT_CITY"
DELETE_CITY = "DELETE_CITY"

# Reporting
VIEW_DASHBOARD = "VIEW_DASHBOARD"
READ_EVENTS = "READ_EVENTS"


def lookup_permissions(resource: str) -> dict:
    """
    READ/CREATE/EDIT/DELETE permission names for a simple lookup resource

    >>> lookup_permissions("MARITAL_STATUSES")["create"]
    'CREATE_MARITAL_STATUSES'
    """
    return {
        "read": f"READ_{resource}",
        "create": f"CREATE_{resource}",
        "edit": f"EDIT_{resource}",
        "delete": f"DELETE_{resource}",
    }


# Simple lookup resources served by the generic referential routers
LOOKUP_RESOURCES = (
    "MARITAL_STATUSES",
    "NATIONALITIES",
    "GENDERS",
    "EDUCATION_LEVELS",
    "STATUSES",
)

# Lookups owned by a company (listed per company, names unique per company)
COMPANY_LOOKUP_RESOURCES = (
    "JOB_POSITIONS",
    "CONTRACT_TYPES",
)

_STATIC_PERMISSIONS = (
    (READ_USERS, "List users", "users", "read"),
    (VIEW_USERS, "View a user", "users", "view"),
    (CREATE_USERS, "Create users", "users", "create"),
    (EDIT_USERS, "Edit users", "users", "edit"),
    (DELETE_USERS, "Delete users", "users", "delete"),
    (READ_ROLES, "List roles", "roles", "read"),
    (VIEW_ROLE, "View a role", "roles", "view"),
    (CREATE_ROLE, "Create roles", "roles", "create"),
    (EDIT_ROLE, "Edit roles", "roles", "edit"),
    (DELETE_ROLE, "Delete roles", "roles", "delete"),
    (ASSIGN_ROLES, "Assign roles to users", "roles", "assign"),
    (REVOKE_ROLES, "Revoke roles from users", "roles", "revoke"),
    (READ_PERMISSIONS, "List permissions", "permissions", "read"),
    (MANAGE_PERMISSIONS, "Manage permissions and role grants", "permissions", "manage"),
    (READ_COMPANIES, "List companies", "companies", "read"),
    (VIEW_COMPANY, "View a company", "companies", "view"),
    (CREATE_COMPANY, "Create companies", "companies", "create"),
    (EDIT_COMPANY, "Edit companies", "companies", "edit"),
    (DELETE_COMPANY, "Delete companies", "companies", "delete"),
    (READ_EMPLOYEES, "List employees", "employees", "read"),
    (VIEW_EMPLOYEE, "View an employee", "employees", "view"),
    (CREATE_EMPLOYEE, "Create employees", "employees", "create"),
    (EDIT_EMPLOYEE, "Edit employees", "employees", "edit"),
    (DELETE_EMPLOYEE, "Delete employees", "employees", "delete"),
    (READ_EMPLOYEE_CONTRACTS, "List employee contracts", "employee_contracts", "read"),
    (VIEW_EMPLOYEE_CONTRACT, "View an employee contract", "employee_contracts", "view"),
    (CREATE_EMPLOYEE_CONTRACT, "Create employee contracts", "employee_contracts", "create"),
    (EDIT_EMPLOYEE_CONTRACT, "Edit employee contracts", "employee_contracts", "edit"),
    (DELETE_EMPLOYEE_CONTRACT, "Delete employee contracts", "employee_contracts", "delete"),
    (READ_EMPLOYEE_SALARIES, "List employee salaries", "employee_salaries", "read"),
    (VIEW_EMPLOYEE_SALARY, "View an employee salary", "employee_salaries", "view"),
    (CREATE_EMPLOYEE_SALARY, "Create employee salaries", "employee_salaries", "create"),
    (EDIT_EMPLOYEE_SALARY, "Edit employee salaries", "employee_salaries", "edit"),
    (DELETE_EMPLOYEE_SALARY, "Delete employee salaries", "employee_salaries", "delete"),
    (READ_COUNTRIES, "List countries", "countries", "read"),
    (VIEW_COUNTRY, "View a country", "countries", "view"),
    (CREATE_COUNTRY, "Create countries", "countries", "create"),
    (EDIT_COUNTRY, "Edit countries", "countries", "edit"),
    (DELETE_COUNTRY, "Delete countries", "countries", "delete"),
    (READ_CITIES, "List cities", "cities", "read"),
    (VIEW_CITY, "View a city", "cities", "view"),
    (CREATE_CITY, "Create cities", "cities", "create"),
    (EDIT_CITY, "Edit cities", "cities", "edit"),
    (DELETE_CITY, "Delete cities", "cities", "delete"),
    (VIEW_DASHBOARD, "View dashboards", "dashboard", "view"),
    (READ_EVENTS, "Read the audit event feed", "events", "read"),
)


def permission_catalog() -> list:
    """(name, description, resource, action) for every known permission"""
    catalog = list(_STATIC_PERMISSIONS)
    for resource in LOOKUP_RESOURCES + COMPANY_LOOKUP_RESOURCES:
        names = lookup_permissions(resource)
        label = resource.lower().replace("_", " ")
        for action, name in names.items():
            catalog.append((name, f"{action.capitalize()} {label}", resource.lower(), action))
    return catalog
