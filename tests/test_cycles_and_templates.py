import pytest

from conftest import default_sections
from appraisal_manager.core.exceptions import DomainValidationError, InvalidTransitionError, NotFoundError
from appraisal_manager.models.appraisal_template import AppraisalTemplate
from appraisal_manager.schemas.cycle import CycleCreate, CycleUpdate
from appraisal_manager.schemas.template import TemplateCreate, TemplateUpdate
from appraisal_manager.services import cycle_service, template_service


def test_cycle_advances_until_archived(db_session):
    cycle = cycle_service.create_cycle(db_session, CycleCreate(name="FY24", year=2024))
    assert cycle.status == "draft"

    for expected in ("active", "completed", "archived"):
        cycle = cycle_service.advance_cycle(db_session, cycle.id)
        assert cycle.status == expected

    with pytest.raises(InvalidTransitionError):
        cycle_service.advance_cycle(db_session, cycle.id)


def test_cycles_listed_by_year(db_session):
    for year in (2022, 2024, 2023):
        cycle_service.create_cycle(db_session, CycleCreate(name=f"FY{year}", year=year))
    assert [c.year for c in cycle_service.list_cycles(db_session)] == [2024, 2023, 2022]


def test_cycle_update_and_delete(db_session):
    cycle = cycle_service.create_cycle(db_session, CycleCreate(name="FY24", year=2024))
    cycle = cycle_service.update_cycle(db_session, cycle.id, CycleUpdate(description="Annual"))
    assert cycle.description == "Annual"
    assert cycle.name == "FY24"

    cycle_service.delete_cycle(db_session, cycle.id)
    with pytest.raises(NotFoundError):
        cycle_service.get_cycle(db_session, cycle.id)


def test_cycle_dates_must_be_ordered():
    with pytest.raises(ValueError):
        CycleCreate(name="FY24", year=2024, start_date="2024-12-31", end_date="2024-01-01")


def _template_payload(weights, review_type="both"):
    sections = []
    for i, weight in enumerate(weights):
        sections.append({"id": f"s{i}", "title": f"Section {i}", "weight": weight, "questions": []})
    return TemplateCreate(name="Standard", review_type=review_type, sections=sections)


def test_template_weights_must_total_100(db_session):
    with pytest.raises(DomainValidationError) as exc_info:
        template_service.create_template(db_session, _template_payload([60, 30]))
    assert exc_info.value.details == {"total_weight": 90}
    assert db_session.query(AppraisalTemplate).count() == 0

    template = template_service.create_template(db_session, _template_payload([60, 40]))
    assert template.review_type == "both"
    assert [s["weight"] for s in template.sections] == [60, 40]


def test_section_weight_bounds():
    with pytest.raises(ValueError):
        _template_payload([120, -20])


def test_template_update_revalidates_sections(db_session):
    template = template_service.create_template(
        db_session, TemplateCreate(name="Standard", sections=default_sections())
    )

    with pytest.raises(DomainValidationError):
        template_service.update_template(
            db_session,
            template.id,
            TemplateUpdate(sections=[{"id": "s1", "title": "Only", "weight": 50}]),
        )

    template = template_service.update_template(
        db_session, template.id, TemplateUpdate(name="Renamed", review_type="manager")
    )
    assert template.name == "Renamed"
    assert template.review_type == "manager"
    assert template.sections[0]["questions"][0]["id"] == "q1"


def test_template_delete(db_session):
    template = template_service.create_template(
        db_session, TemplateCreate(name="Standard", sections=default_sections())
    )
    template_service.delete_template(db_session, template.id)
    assert template_service.list_templates(db_session) == []


def test_cycle_with_appraisals_cannot_be_deleted(db_session, cycle, make_appraisal):
    make_appraisal()

    with pytest.raises(InvalidTransitionError) as exc_info:
        cycle_service.delete_cycle(db_session, cycle.id)
    assert exc_info.value.details == {"appraisals": 1}
    assert cycle_service.get_cycle(db_session, cycle.id).id == cycle.id


def test_template_in_use_cannot_be_deleted(db_session, make_template, make_appraisal):
    template = make_template("both")
    make_appraisal(template=template)

    with pytest.raises(InvalidTransitionError):
        template_service.delete_template(db_session, template.id)
    assert template_service.get_template(db_session, template.id).id == template.id
