from flask import jsonify


def ok(data=None, message=None, status=200, headers=None):
    payload = {"success": True}
    if message:
        payload["message"] = message
    if data is not None:
        payload["data"] = data
    resp = jsonify(payload)
    if headers:
        resp.headers.update(headers)
    return resp, status


def error(reason, status=400, details=None, message=None):
    payload = {"success": False, "error": reason}
    if details:
        payload["details"] = details
    if message:
        payload["message"] = message
    return jsonify(payload), status


def validation_error_response(errors):
    details = [
        {
            "field": ".".join(str(p) for p in err.get("loc", ())) or "body",
            "message": err.get("msg"),
            "type": err.get("type"),
        }
        for err in errors
    ]
    return error("Invalid request data", status=400, details=details)
