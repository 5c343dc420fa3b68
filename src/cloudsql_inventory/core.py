# OAuth scope for the Cloud SQL Admin API (instances.list)
SQLSERVICE_ADMIN_SCOPE = "https://www.googleapis.com/auth/sqlservice.admin"

SQLADMIN_API = "sqladmin"
SQLADMIN_VERSION = "v1beta4"

# Project discovery via the gcloud CLI
# Prints one project ID per line.
GCLOUD_PROJECTS_CMD = ["gcloud", "projects", "list", "--format=value(projectId)"]

# Report columns, shared by the terminal table and the CSV file
COLUMNS = ["Project ID", "Instance", "Database Version"]

# e.g. cloudsql_version_March2025.csv
CSV_FILENAME_TEMPLATE = "cloudsql_version_{month}{year}.csv"

MONTH_NAMES = [
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
]
