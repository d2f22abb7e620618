from flask import Flask, Blueprint, current_app, request, jsonify
from flask_cors import CORS
from werkzeug.exceptions import HTTPException
from waitress import serve
import os
import logging

from config import (
    HOST,
    PORT,
    LOG_LEVEL,
    STORAGE_BACKEND,
    DATABASE_URL,
    SEED_SAMPLE_DATA,
    VERSION,
)
from utils.anomalies import detect_anomalies
from utils.billing import calculate_bill, estimate_revenue, parse_usage
from utils.db_util import SqlCustomerStore
from utils.errors import VoltAIError, StorageError, ValidationError
from utils.store import CustomerStore, InMemoryCustomerStore, seed_sample_customers
from utils.util import validate_payload, utc_now
from models import db

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger("voltai")

bp = Blueprint("voltai", __name__)

CUSTOMER_PAYLOAD_FIELDS = [
    {"field": "name", "type": str, "required": True},
    {"field": "address", "type": str, "required": True},
]

# messages returned to the caller when the store fails, keyed by endpoint
STORAGE_ERROR_MESSAGES = {
    "voltai.list_customers": "Failed to fetch customers",
    "voltai.add_customer": "Failed to add customer",
    "voltai.update_usage": "Failed to update usage",
    "voltai.delete_customer": "Failed to delete customer",
    "voltai.customer_stats": "Failed to fetch customer stats",
    "voltai.health": "Failed to count customers",
}


def create_app(config: dict = None) -> Flask:
    """
    Builds the flask application and its customer store
    Args:
        config: settings overriding the environment (STORAGE_BACKEND, DATABASE_URL,
            SEED_SAMPLE_DATA)

    Returns:
        flask application
    """
    app = Flask(__name__)
    app.config.update(
        STORAGE_BACKEND=STORAGE_BACKEND,
        DATABASE_URL=DATABASE_URL,
        SEED_SAMPLE_DATA=SEED_SAMPLE_DATA,
    )
    app.config.update(config or {})

    backend = app.config["STORAGE_BACKEND"]
    if backend == "memory":
        store = InMemoryCustomerStore()
        if app.config["SEED_SAMPLE_DATA"]:
            seed_sample_customers(store)
    elif backend == "database":
        store = init_database(app)
    else:
        raise ValueError(f"unsupported storage backend: {backend}")

    app.extensions["customer_store"] = store
    app.register_blueprint(bp)
    register_error_handlers(app)
    CORS(app)

    logger.info(f"using {store.label} customer store")
    return app


def init_database(app: Flask) -> SqlCustomerStore:
    """
    Configures sqlalchemy for the app, creates the tables and seeds them if asked
    Args:
        app: flask application

    Returns:
        sql customer store
    """
    database_url = app.config["DATABASE_URL"]
    if database_url.startswith("sqlite:///") and ":memory:" not in database_url:
        os.makedirs(os.path.dirname(database_url[len("sqlite:///") :]), exist_ok=True)

    app.config["SQLALCHEMY_DATABASE_URI"] = database_url
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False

    # initialize the database
    db.init_app(app)

    store = SqlCustomerStore()
    with app.app_context():
        db.create_all()
        if app.config["SEED_SAMPLE_DATA"]:
            seed_sample_customers(store)

    return store


def get_store() -> CustomerStore:
    return current_app.extensions["customer_store"]


def get_json_payload() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("missing json payload")
    return data


# routes
@bp.route("/", methods=["GET"])
def index():
    return jsonify(
        {
            "message": "VoltAI Backend is running!",
            "version": VERSION,
            "database": get_store().label,
        }
    )


@bp.route("/health", methods=["GET"])
def health():
    return jsonify(
        {
            "status": "OK",
            "timestamp": utc_now().isoformat(),
            "customers": get_store().count(),
        }
    )


@bp.route("/customers", methods=["GET"])
def list_customers():
    logger.info("list_customers")
    return jsonify(get_store().list())


@bp.route("/customers", methods=["POST"])
def add_customer():
    logger.info("add_customer")

    data = get_json_payload()
    logger.info(f"received customer payload: {data}")

    validate_payload(data, CUSTOMER_PAYLOAD_FIELDS)

    # the dashboard sends initialUsage, the database-backed api took monthly_usage
    if data.get("monthly_usage") is not None:
        usage = parse_usage(data["monthly_usage"], "monthly_usage")
    elif data.get("initialUsage") is not None:
        usage = parse_usage(data["initialUsage"], "initialUsage")
    else:
        usage = 0

    customer = get_store().create(data["name"], data["address"], usage)
    logger.info(f"customer {customer['id']} added")

    return jsonify(
        {
            "success": True,
            "customer": customer,
            "message": "Customer added successfully",
        }
    )


@bp.route("/customers/<int:customer_id>/usage", methods=["PUT"])
def update_usage(customer_id: int):
    logger.info(f"update_usage {customer_id}")

    data = get_json_payload()
    usage = parse_usage(data.get("usage"))

    customer = get_store().update_usage(customer_id, usage)

    return jsonify(
        {
            "success": True,
            "customer": customer,
            "message": "Usage updated successfully",
        }
    )


@bp.route("/customers/<int:customer_id>", methods=["DELETE"])
def delete_customer(customer_id: int):
    logger.info(f"delete_customer {customer_id}")

    get_store().delete(customer_id)

    return jsonify({"success": True, "message": "Customer deleted successfully"})


@bp.route("/customers/stats", methods=["GET"])
def customer_stats():
    logger.info("customer_stats")

    customers = get_store().list()
    return jsonify(
        {
            "totalCustomers": len(customers),
            "highUsageAlerts": sum(1 for c in customers if c.get("alert")),
            "totalUsage": round(
                sum(c.get("monthly_usage") or 0 for c in customers), 2
            ),
            "estimatedRevenue": estimate_revenue(customers),
        }
    )


@bp.route("/calculate-bill", methods=["POST"])
def bill():
    logger.info("calculate_bill")

    data = get_json_payload()
    return jsonify(calculate_bill(data.get("usage")))


@bp.route("/detect-anomalies", methods=["POST"])
def anomalies():
    logger.info("detect_anomalies")

    data = get_json_payload()
    return jsonify(detect_anomalies(data.get("usageHistory")))


# error handling
def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(StorageError, handle_storage_error)
    app.register_error_handler(VoltAIError, handle_voltai_error)
    app.register_error_handler(HTTPException, handle_http_exception)
    app.register_error_handler(Exception, handle_unexpected_error)


def handle_voltai_error(e: VoltAIError) -> tuple:
    logger.warning(f"{request.method} {request.path} failed: {e.message}")
    return jsonify({"error": e.message}), e.status_code


def handle_storage_error(e: StorageError) -> tuple:
    logger.error(f"storage error on {request.method} {request.path}: {e.message}")
    message = STORAGE_ERROR_MESSAGES.get(request.endpoint, "Internal server error")
    return jsonify({"error": message}), e.status_code


def handle_http_exception(e: HTTPException) -> tuple:
    return jsonify({"error": e.description}), e.code


def handle_unexpected_error(e: Exception) -> tuple:
    logger.exception(f"unhandled exception on {request.method} {request.path}")
    return jsonify({"error": "Internal server error"}), 500


if __name__ == "__main__":
    logger.info(f"VoltAI server running on http://{HOST}:{PORT}")
    serve(create_app(), host=HOST, port=PORT)
