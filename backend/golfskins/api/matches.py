from flask import Blueprint, jsonify, request, current_app
from flask_login import login_required, current_user


matches = Blueprint('matches', __name__)


def _service():
    return current_app.extensions['match_service']


def _body():
    return request.get_json(silent=True)


@matches.route('', methods=['POST'])
@login_required
def create_match():
    return jsonify(_service().create_match(current_user.id, _body())), 201


@matches.route('/with-course', methods=['POST'])
@login_required
def create_match_with_course():
    return jsonify(_service().create_match_with_course(current_user.id, _body())), 201


@matches.route('', methods=['GET'])
@login_required
def list_matches():
    args = request.args
    return jsonify(_service().list_matches(
        page=args.get('page'),
        limit=args.get('limit'),
        status=args.get('status'),
        date=args.get('date'),
    ))


@matches.route('/<int:match_id>', methods=['GET'])
@login_required
def get_match(match_id):
    return jsonify(_service().get_match(match_id))


@matches.route('/<int:match_id>', methods=['PUT'])
@login_required
def update_match(match_id):
    return jsonify(_service().update_match(match_id, current_user.id, _body()))


@matches.route('/<int:match_id>', methods=['DELETE'])
@login_required
def delete_match(match_id):
    return jsonify(_service().delete_match(match_id, current_user.id))


@matches.route('/<int:match_id>/join', methods=['POST'])
@login_required
def join_match(match_id):
    return jsonify(_service().join(match_id, current_user.id))


@matches.route('/join-by-code', methods=['POST'])
@login_required
def join_by_code():
    data = _body() or {}
    return jsonify(_service().join_by_code(data.get('join_code'), current_user.id))


@matches.route('/<int:match_id>/leave', methods=['POST'])
@login_required
def leave_match(match_id):
    return jsonify(_service().leave(match_id, current_user.id))


@matches.route('/<int:match_id>/start', methods=['POST'])
@login_required
def start_match(match_id):
    return jsonify(_service().start(match_id, current_user.id))


@matches.route('/<int:match_id>/complete', methods=['POST'])
@login_required
def complete_match(match_id):
    return jsonify(_service().complete(match_id, current_user.id))


@matches.route('/<int:match_id>/cancel', methods=['POST'])
@login_required
def cancel_match(match_id):
    return jsonify(_service().cancel(match_id, current_user.id))


@matches.route('/<int:match_id>/score', methods=['POST'])
@login_required
def record_score(match_id):
    return jsonify(_service().record_score(match_id, current_user.id, _body())), 201


@matches.route('/<int:match_id>/scores', methods=['GET'])
@login_required
def get_scores(match_id):
    return jsonify(_service().get_scores(match_id))


@matches.route('/<int:match_id>/scorecard', methods=['GET'])
@login_required
def get_scorecard(match_id):
    return jsonify(_service().get_scorecard(match_id))
