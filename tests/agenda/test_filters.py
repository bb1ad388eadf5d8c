"""Tests for session filtering and view projection."""

from camp_agenda.agenda.filters import SessionFilter, ViewMode, filter_sessions, project_view
from camp_agenda.agenda.types import AgendaItem, Clinician, Location, StaffMember


def _session(session_id, title, start, end="23:00", **overrides) -> AgendaItem:
    return AgendaItem(id=session_id, title=title, start_time=start, end_time=end, **overrides)


class TestFilterSessions:
    def test_sorts_by_start_time(self):
        items = [_session(1, "A", "09:00"), _session(2, "B", "08:00")]
        result = filter_sessions(items, SessionFilter())
        assert [item.title for item in result] == ["B", "A"]

    def test_pass_through_drops_none_and_is_idempotent(self):
        items = [_session(1, "Lunch", "12:00"), None, _session(2, "Warmup", "07:45"), None]
        criteria = SessionFilter(session_type="all", clinician_id=None, location_id=None)

        once = filter_sessions(items, criteria)
        twice = filter_sessions(once, criteria)

        assert [item.title for item in once] == ["Warmup", "Lunch"]
        assert once == twice

    def test_does_not_mutate_input(self):
        items = [_session(1, "A", "09:00"), _session(2, "B", "08:00")]
        filter_sessions(items)
        assert [item.title for item in items] == ["A", "B"]

    def test_stable_for_equal_start_times(self):
        items = [_session(1, "First", "09:00"), _session(2, "Second", "09:00"), _session(3, "Early", "08:00")]
        assert [item.id for item in filter_sessions(items)] == [3, 1, 2]

    def test_filters_by_session_type(self):
        items = [
            _session(1, "Lunch", "12:00", session_type="meal"),
            _session(2, "Shooting", "09:00", session_type="drill"),
        ]
        assert [item.id for item in filter_sessions(items, SessionFilter(session_type="meal"))] == [1]

    def test_zero_ids_are_pass_through(self):
        items = [_session(1, "A", "09:00", clinician_id=5), _session(2, "B", "10:00", location_id=7)]
        assert len(filter_sessions(items, SessionFilter(clinician_id=0, location_id=0))) == 2

    def test_filters_by_clinician_and_location(self):
        items = [
            _session(1, "A", "09:00", clinician_id=5, location_id=7),
            _session(2, "B", "10:00", clinician_id=5, location_id=8),
            _session(3, "C", "11:00", clinician_id=6, location_id=7),
        ]
        result = filter_sessions(items, SessionFilter(clinician_id=5, location_id=7))
        assert [item.id for item in result] == [1]


class TestProjectView:
    def test_timeline_rows_resolve_names(self):
        items = [
            _session(
                1,
                "Defense",
                "10:00",
                "11:00",
                session_type="drill",
                clinician_id=5,
                location_id=7,
                staff_assignments=[StaffMember(id=9, name="Sam Ortiz")],
            )
        ]
        view = project_view(
            items,
            mode=ViewMode.TIMELINE,
            clinicians=[Clinician(id=5, name="Dana Brooks")],
            locations=[Location(id=7, name="Court A")],
        )

        row = view.rows[0]
        assert row.time_range == "10:00 - 11:00"
        assert row.type_label == "Drill"
        assert row.clinician == "Dana Brooks"
        assert row.location == "Court A"
        assert row.staff == ("Sam Ortiz",)
        assert row.status is None
        assert "Status" not in view.columns

    def test_list_mode_adds_status(self):
        items = [_session(1, "Defense", "10:00", status="scheduled")]
        view = project_view(items, mode=ViewMode.LIST)
        assert view.rows[0].status == "Scheduled"
        assert view.columns[-1] == "Status"

    def test_switching_modes_keeps_same_sessions(self):
        items = [_session(1, "A", "09:00"), _session(2, "B", "08:00")]
        timeline = project_view(items, mode=ViewMode.TIMELINE)
        listing = project_view(items, mode=ViewMode.LIST)
        assert [r.session_id for r in timeline.rows] == [r.session_id for r in listing.rows] == [2, 1]

    def test_unknown_references_render_empty(self):
        view = project_view([_session(1, "A", "09:00", clinician_id=99, location_id=98)])
        assert view.rows[0].clinician is None
        assert view.rows[0].location is None
