"""Read-only client for the external golf course catalog."""
from typing import Optional

from flask import current_app
import requests

from golfskins.errors import Invalid, UpstreamUnavailable


HOLES_PER_ROUND = 18
DEFAULT_PAR = 4


class CourseClient:
    def __init__(self, base_url: str, api_key: str = '', timeout: float = 10.0, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    @classmethod
    def from_config(cls, config) -> 'CourseClient':
        return cls(
            base_url=config.get('COURSE_API_BASE_URL', ''),
            api_key=config.get('COURSE_API_KEY', ''),
            timeout=float(config.get('COURSE_API_TIMEOUT_SEC', 10)),
        )

    def _get(self, path: str, what: str) -> dict:
        url = f"{self.base_url}{path}"
        try:
            response = self.session.get(
                url,
                headers={
                    'Authorization': f"Bearer {self.api_key}",
                    'Content-Type': 'application/json',
                },
                timeout=self.timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.RequestException, ValueError) as exc:
            current_app.logger.error(f"[course-api] failed to fetch {what}: {exc}")
            raise UpstreamUnavailable(f"Failed to fetch {what}") from exc
        if not isinstance(data, dict):
            raise UpstreamUnavailable(f"Unexpected response for {what}")
        if data.get('message') == 'Invalid API key':
            current_app.logger.error(f"[course-api] rejected API key fetching {what}")
            raise UpstreamUnavailable('Course catalog rejected the API key')
        return data

    def get_course(self, course_id: str) -> dict:
        return self._get(f"/courses/{course_id}", f"course {course_id}")

    def get_club(self, club_id: str) -> dict:
        return self._get(f"/clubs/{club_id}", f"club {club_id}")


def get_tee(course: dict, tee_id: str) -> Optional[dict]:
    for tee in course.get('tees') or []:
        if str(tee.get('teeID')) == str(tee_id):
            return tee
    return None


def require_tee(course: dict, tee_id: str) -> dict:
    tee = get_tee(course, tee_id)
    if tee is None:
        raise Invalid('Invalid tee selection')
    return tee


def _pick(values, hole_number: int):
    values = values or []
    if 1 <= hole_number <= len(values):
        return values[hole_number - 1]
    return None


def par_for_hole(course: dict, hole_number: int, women: bool = False) -> int:
    par = _pick(course.get('parsWomen' if women else 'parsMen'), hole_number)
    try:
        return int(par) if par else DEFAULT_PAR
    except (TypeError, ValueError):
        return DEFAULT_PAR


def stroke_index_for_hole(course: dict, hole_number: int, women: bool = False) -> int:
    index = _pick(course.get('indexesWomen' if women else 'indexesMen'), hole_number)
    try:
        return int(index) if index else hole_number
    except (TypeError, ValueError):
        return hole_number


def distance_for_hole(tee: dict, hole_number: int) -> Optional[int]:
    length = tee.get(f"length{hole_number}")
    try:
        return int(length) if length else None
    except (TypeError, ValueError):
        return None


def course_summary(course: dict, tee: dict) -> dict:
    city, state = course.get('city'), course.get('state')
    location = ', '.join(part for part in (city, state) if part) or None
    return {
        'course_name': course.get('courseName') or course.get('clubName') or 'Unknown course',
        'club_name': course.get('clubName'),
        'location': location,
        'tee_name': tee.get('teeName'),
        'course_rating': tee.get('courseRatingMen'),
        'slope': tee.get('slopeMen'),
    }


def hole_layout(course: dict, tee: dict) -> list:
    """Per-hole par, stroke index and distance for seeding a full round."""
    return [
        {
            'hole_number': number,
            'par': par_for_hole(course, number),
            'stroke_index': stroke_index_for_hole(course, number),
            'distance': distance_for_hole(tee, number),
        }
        for number in range(1, HOLES_PER_ROUND + 1)
    ]
