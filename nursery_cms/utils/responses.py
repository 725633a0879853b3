from flask import abort, jsonify


def success(status=200, **payload):
    return jsonify(success=True, **payload), status


def found_or_404(obj, label):
    if obj is None:
        abort(404, description=f'{label} not found')
    return obj
