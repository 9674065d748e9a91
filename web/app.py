"""Flask JSON API for truck fleet maintenance tracking."""

import os
from datetime import date
from pathlib import Path

from flask import Flask, current_app, jsonify, request
from werkzeug.exceptions import HTTPException

from fleet import DuePolicy, Fleet, Status
from fleet.loader import (
    client_to_dict,
    create_fleet,
    load_fleet,
    parse_client,
    parse_record,
    parse_truck,
    record_to_dict,
    save_fleet,
    truck_to_dict,
)

app = Flask(__name__)
app.secret_key = os.environ.get("SECRET_KEY", "dev-secret-key-change-in-prod")

# Path to the fleet file (relative to project root unless FLEET_FILE is set)
app.config["FLEET_FILE"] = os.environ.get(
    "FLEET_FILE", str(Path(__file__).parent.parent / "fleets" / "demo.yaml")
)

REQUIRED_TRUCK_FIELDS = ("id", "plateNumber", "brand", "model", "year", "size", "clientId")
REQUIRED_CLIENT_FIELDS = ("id", "name", "contactPerson", "phone")
REQUIRED_RECORD_FIELDS = (
    "id",
    "truckId",
    "serviceDate",
    "odometer",
    "serviceTypes",
    "description",
    "mechanic",
)


class ApiError(Exception):
    """Error returned to the client as {"error": message}."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


@app.errorhandler(ApiError)
def handle_api_error(error: ApiError):
    return jsonify(error=error.message), error.status_code


@app.errorhandler(Exception)
def handle_unexpected_error(error: Exception):
    if isinstance(error, HTTPException):
        return jsonify(error=error.description), error.code
    current_app.logger.exception("Unhandled error on %s", request.path)
    return jsonify(error=str(error) or "Internal server error"), 500


def fleet_path() -> Path:
    """Fleet file for this app, created empty on first use."""
    path = Path(current_app.config["FLEET_FILE"])
    if not path.exists():
        current_app.logger.info("Creating empty fleet file %s", path)
        create_fleet(path)
    return path


def get_fleet() -> Fleet:
    return load_fleet(fleet_path())


def evaluation_date() -> date:
    """Date to evaluate against: ?today=YYYY-MM-DD, defaults to today."""
    value = request.args.get("today")
    if not value:
        return date.today()
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ApiError(f"Invalid date '{value}' (expected YYYY-MM-DD)")


def get_body() -> dict:
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        raise ApiError("Request body must be a JSON object")
    return body


def require_fields(body: dict, fields, kind: str) -> None:
    missing = [f for f in fields if body.get(f) in (None, "", [])]
    if missing:
        raise ApiError(f"Missing required {kind} fields: {', '.join(missing)}")


def truck_payload(fleet: Fleet, truck, today: date) -> dict:
    """Truck dict with its aggregated service status embedded."""
    payload = truck_to_dict(truck)
    payload["serviceStatus"] = fleet.aggregate_truck(truck, today).to_dict()
    return payload


def build_truck(body: dict, policy: DuePolicy):
    try:
        return parse_truck(body, policy)
    except (TypeError, ValueError) as e:
        raise ApiError(f"Invalid truck: {e}")


# =============================================================================
# Health
# =============================================================================


@app.route("/api/health")
def health():
    return jsonify(status="ok")


# =============================================================================
# Clients
# =============================================================================


@app.route("/api/clients", methods=["GET"])
def list_clients():
    fleet = get_fleet()
    return jsonify([client_to_dict(c) for c in fleet.clients])


@app.route("/api/clients", methods=["POST"])
def create_client():
    body = get_body()
    require_fields(body, REQUIRED_CLIENT_FIELDS, "client")

    fleet = get_fleet()
    if fleet.get_client(body["id"]) is not None:
        raise ApiError(f"Client '{body['id']}' already exists", 409)

    client = parse_client(body)
    fleet.clients.append(client)
    save_fleet(fleet_path(), fleet)
    return jsonify(client_to_dict(client)), 201


@app.route("/api/clients/<client_id>", methods=["DELETE"])
def remove_client(client_id: str):
    fleet = get_fleet()
    try:
        fleet.delete_client(client_id)
    except KeyError:
        raise ApiError(f"Client '{client_id}' not found", 404)
    except ValueError as e:
        raise ApiError(str(e), 409)
    save_fleet(fleet_path(), fleet)
    return "", 204


# =============================================================================
# Trucks
# =============================================================================


@app.route("/api/trucks", methods=["GET"])
def list_trucks():
    fleet = get_fleet()
    today = evaluation_date()

    trucks = fleet.trucks
    client_id = request.args.get("clientId")
    if client_id:
        trucks = fleet.trucks_for_client(client_id)

    status_filter = request.args.get("status", "").lower() or None
    payloads = [truck_payload(fleet, t, today) for t in trucks]
    if status_filter:
        if status_filter not in [s.label for s in Status]:
            raise ApiError(f"Unknown status '{status_filter}'")
        payloads = [p for p in payloads if p["serviceStatus"]["status"] == status_filter]

    return jsonify(payloads)


@app.route("/api/trucks", methods=["POST"])
def create_truck():
    body = get_body()
    require_fields(body, REQUIRED_TRUCK_FIELDS, "truck")

    fleet = get_fleet()
    if fleet.get_truck(body["id"]) is not None:
        raise ApiError(f"Truck '{body['id']}' already exists", 409)
    if fleet.get_client(body["clientId"]) is None:
        raise ApiError(f"Client '{body['clientId']}' not found")

    truck = build_truck(body, fleet.policy)
    fleet.trucks.append(truck)
    save_fleet(fleet_path(), fleet)
    current_app.logger.info("Registered truck %s (%s)", truck.id, truck.plate_number)
    return jsonify(truck_payload(fleet, truck, evaluation_date())), 201


@app.route("/api/trucks/<truck_id>", methods=["GET"])
def get_truck(truck_id: str):
    fleet = get_fleet()
    truck = fleet.get_truck(truck_id)
    if truck is None:
        raise ApiError(f"Truck '{truck_id}' not found", 404)

    today = evaluation_date()
    payload = truck_payload(fleet, truck, today)
    payload["intervals"] = [
        dict(result.to_dict(), name=name) for name, result in fleet.evaluate_truck(truck, today)
    ]
    payload["serviceRecords"] = [record_to_dict(r) for r in fleet.records_for_truck(truck_id)]
    return jsonify(payload)


@app.route("/api/trucks/<truck_id>", methods=["PUT"])
def replace_truck(truck_id: str):
    body = get_body()
    fleet = get_fleet()
    truck = fleet.get_truck(truck_id)
    if truck is None:
        raise ApiError(f"Truck '{truck_id}' not found", 404)

    merged = truck_to_dict(truck)
    merged.update(body)
    merged["id"] = truck_id
    if fleet.get_client(merged["clientId"]) is None:
        raise ApiError(f"Client '{merged['clientId']}' not found")

    updated = build_truck(merged, fleet.policy)
    fleet.trucks[fleet.trucks.index(truck)] = updated
    save_fleet(fleet_path(), fleet)
    return jsonify(truck_payload(fleet, updated, evaluation_date()))


@app.route("/api/trucks/<truck_id>", methods=["DELETE"])
def remove_truck(truck_id: str):
    fleet = get_fleet()
    try:
        fleet.delete_truck(truck_id)
    except KeyError:
        raise ApiError(f"Truck '{truck_id}' not found", 404)
    save_fleet(fleet_path(), fleet)
    return "", 204


@app.route("/api/trucks/<truck_id>/odometer", methods=["PUT"])
def add_trip(truck_id: str):
    body = get_body()
    fleet = get_fleet()
    if fleet.get_truck(truck_id) is None:
        raise ApiError(f"Truck '{truck_id}' not found", 404)

    try:
        truck = fleet.add_trip_distance(truck_id, body.get("addedKm"))
    except ValueError as e:
        raise ApiError(str(e))
    save_fleet(fleet_path(), fleet)
    return jsonify(truck_payload(fleet, truck, evaluation_date()))


# =============================================================================
# Service records
# =============================================================================


@app.route("/api/services", methods=["GET"])
def list_services():
    fleet = get_fleet()
    records = fleet.get_records_sorted()
    truck_id = request.args.get("truckId")
    if truck_id:
        records = [r for r in records if r.truck_id == truck_id]
    return jsonify([record_to_dict(r) for r in records])


@app.route("/api/services", methods=["POST"])
def create_service():
    body = get_body()
    require_fields(body, REQUIRED_RECORD_FIELDS, "service record")

    fleet = get_fleet()
    if any(r.id == body["id"] for r in fleet.records):
        raise ApiError(f"Service record '{body['id']}' already exists", 409)
    if fleet.get_truck(body["truckId"]) is None:
        raise ApiError(f"Truck '{body['truckId']}' not found", 404)

    try:
        record = parse_record(body)
    except (KeyError, TypeError, ValueError) as e:
        raise ApiError(f"Invalid service record: {e}")

    reset = fleet.log_service(record)
    save_fleet(fleet_path(), fleet)

    payload = record_to_dict(record)
    payload["resetSchedules"] = [s.id for s in reset]
    return jsonify(payload), 201


# =============================================================================
# Monitoring
# =============================================================================


@app.route("/api/monitoring")
def monitoring():
    """Trucks needing service now or due this month, most urgent first."""
    fleet = get_fleet()
    today = evaluation_date()
    return jsonify(
        [
            dict(truck_to_dict(truck), serviceStatus=result.to_dict())
            for truck, result in fleet.needs_attention(today)
        ]
    )


@app.route("/api/summary")
def summary():
    fleet = get_fleet()
    return jsonify(fleet.summary(evaluation_date()))


if __name__ == "__main__":
    # Run with debug mode for development
    # Using 5001 to avoid conflict with macOS AirPlay Receiver on 5000
    app.run(debug=True, host="0.0.0.0", port=5001)
