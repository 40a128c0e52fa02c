"""Constants for the Designate Operator."""

# API Group
API_GROUP = "designate.openstack.org"
API_VERSION = "v1beta1"
API_GROUP_VERSION = f"{API_GROUP}/{API_VERSION}"

# Resource Kinds
KIND_DESIGNATE_API = "DesignateAPI"
PLURAL_DESIGNATE_API = "designateapis"

# Collaborator resources
MARIADB_GROUP = "mariadb.openstack.org"
MARIADB_VERSION = "v1beta1"
MARIADB_PLURAL = "mariadbs"
MARIADB_DATABASE_KIND = "MariaDBDatabase"
MARIADB_DATABASE_PLURAL = "mariadbdatabases"

KEYSTONE_GROUP = "keystone.openstack.org"
KEYSTONE_VERSION = "v1beta1"
KEYSTONE_API_PLURAL = "keystoneapis"
KEYSTONE_SERVICE_KIND = "KeystoneService"
KEYSTONE_SERVICE_PLURAL = "keystoneservices"
KEYSTONE_ENDPOINT_KIND = "KeystoneEndpoint"
KEYSTONE_ENDPOINT_PLURAL = "keystoneendpoints"

ROUTE_GROUP = "route.openshift.io"
ROUTE_VERSION = "v1"
ROUTE_PLURAL = "routes"

# Service identity
SERVICE_NAME = "designate"
SERVICE_TYPE = "dns"
SERVICE_DESCRIPTION = "Designate Service"
DATABASE_NAME = "designate"
DESIGNATE_API_PORT = 9001

# Endpoint classes
ENDPOINT_ADMIN = "admin"
ENDPOINT_INTERNAL = "internal"
ENDPOINT_PUBLIC = "public"
ENDPOINT_CLASSES = (ENDPOINT_ADMIN, ENDPOINT_INTERNAL, ENDPOINT_PUBLIC)

# Labels
LABEL_APP_SELECTOR = "service"
LABEL_OWNER_NAME = f"{API_GROUP}/name"
LABEL_OWNER_UID = f"{API_GROUP}/uid"
LABEL_ENDPOINT = "endpoint"
LABEL_DB_NAME = "dbName"

# Annotations
ANNOTATION_SPEC_HASH = f"{API_GROUP}/spec-hash"
ANNOTATION_INPUT_HASH = f"{API_GROUP}/input-hash"

# Finalizers
FINALIZER = f"{API_GROUP}/designateapi"

# Controller name used in structured logs
CONTROLLER_NAME = "designate-operator"

# Hash keys
HASH_INPUT = "input"
HASH_DB_SYNC = "dbsync"

# Config file names
CUSTOM_SERVICE_CONFIG_FILE = "custom.conf"

# Condition Types
COND_READY = "Ready"
COND_DB_READY = "DBReady"
COND_DB_SYNC_READY = "DBSyncReady"
COND_EXPOSE_SERVICE_READY = "ExposeServiceReady"
COND_INPUT_READY = "InputReady"
COND_SERVICE_CONFIG_READY = "ServiceConfigReady"
COND_DEPLOYMENT_READY = "DeploymentReady"
COND_KEYSTONE_SERVICE_READY = "KeystoneServiceReady"
COND_KEYSTONE_ENDPOINT_READY = "KeystoneEndpointReady"

# Condition status / severity
STATUS_TRUE = "True"
STATUS_FALSE = "False"
STATUS_UNKNOWN = "Unknown"

SEVERITY_ERROR = "Error"
SEVERITY_WARNING = "Warning"
SEVERITY_INFO = "Info"
SEVERITY_NONE = ""

# Condition reasons
REASON_INIT = "Init"
REASON_READY = "Ready"
REASON_REQUESTED = "Requested"
REASON_ERROR = "Error"
REASON_INPUT_CHANGED = "InputChanged"

# Condition messages
MSG_READY = "Setup complete"
MSG_READY_INIT = "Setup started"
MSG_DB_READY = "DB create completed"
MSG_DB_READY_INIT = "DB create not started"
MSG_DB_READY_RUNNING = "DB create in progress"
MSG_DB_READY_ERROR = "DB error occurred {error}"
MSG_DB_SYNC_READY = "DBsync completed"
MSG_DB_SYNC_READY_INIT = "DBsync not started"
MSG_DB_SYNC_READY_RUNNING = "DBsync in progress"
MSG_DB_SYNC_READY_ERROR = "DBsync error occurred {error}"
MSG_EXPOSE_SERVICE_READY = "Exposing service completed"
MSG_EXPOSE_SERVICE_READY_INIT = "Exposing service not started"
MSG_EXPOSE_SERVICE_READY_RUNNING = "Exposing service in progress"
MSG_EXPOSE_SERVICE_READY_ERROR = "Exposing service error occurred {error}"
MSG_INPUT_READY = "Input data complete"
MSG_INPUT_READY_INIT = "Input data not started"
MSG_INPUT_READY_WAITING = "Input data resources missing"
MSG_INPUT_READY_ERROR = "Input data error occurred {error}"
MSG_SERVICE_CONFIG_READY = "Service config create completed"
MSG_SERVICE_CONFIG_READY_INIT = "Service config create not started"
MSG_SERVICE_CONFIG_READY_WAITING = "Service config waiting for {dependency}"
MSG_SERVICE_CONFIG_READY_CHANGED = "Service config changed, applying new input hash"
MSG_SERVICE_CONFIG_READY_ERROR = "Service config create error occurred {error}"
MSG_DEPLOYMENT_READY = "Deployment completed"
MSG_DEPLOYMENT_READY_INIT = "Deployment not started"
MSG_DEPLOYMENT_READY_RUNNING = "Deployment in progress"
MSG_DEPLOYMENT_READY_ERROR = "Deployment error occurred {error}"
MSG_KEYSTONE_SERVICE_READY_INIT = "KeystoneService not started"
MSG_KEYSTONE_SERVICE_READY_RUNNING = "KeystoneService registration in progress"
MSG_KEYSTONE_SERVICE_READY_ERROR = "KeystoneService error occurred {error}"
MSG_KEYSTONE_ENDPOINT_READY_INIT = "KeystoneEndpoint not started"
MSG_KEYSTONE_ENDPOINT_READY_RUNNING = "KeystoneEndpoint registration in progress"
MSG_KEYSTONE_ENDPOINT_READY_ERROR = "KeystoneEndpoint error occurred {error}"

# Event Reasons
EVENT_REASON_RECONCILE_STARTED = "ReconcileStarted"
EVENT_REASON_RECONCILE_FAILED = "ReconcileFailed"
EVENT_REASON_INPUT_CHANGED = "InputChanged"
EVENT_REASON_DB_SYNC_COMPLETED = "DBSyncCompleted"
EVENT_REASON_DELETION_COMPLETED = "DeletionCompleted"
