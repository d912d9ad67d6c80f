from flask import Blueprint, jsonify, current_app
from flask_login import login_required

from golfskins.errors import NotFound
from golfskins.services.courses import course_summary, get_tee, hole_layout


courses = Blueprint('courses', __name__)


def _client():
    return current_app.extensions['match_service'].course_client


@courses.route('/clubs/<string:club_id>', methods=['GET'])
@login_required
def get_club(club_id):
    club = _client().get_club(club_id)
    return jsonify({'club': club, 'message': 'Club details retrieved successfully'})


@courses.route('/<string:course_id>', methods=['GET'])
@login_required
def get_course(course_id):
    course = _client().get_course(course_id)
    return jsonify({'course': course, 'message': 'Course details retrieved successfully'})


@courses.route('/<string:course_id>/tees', methods=['GET'])
@login_required
def list_tees(course_id):
    course = _client().get_course(course_id)
    return jsonify({'tees': course.get('tees') or [], 'message': 'Tees listed successfully'})


@courses.route('/<string:course_id>/tees/<string:tee_id>', methods=['GET'])
@login_required
def get_tee_details(course_id, tee_id):
    course = _client().get_course(course_id)
    tee = get_tee(course, tee_id)
    if tee is None:
        raise NotFound('Tee not found')
    return jsonify({
        'tee': tee,
        'summary': course_summary(course, tee),
        'holes': hole_layout(course, tee),
        'message': 'Tee details retrieved successfully',
    })
