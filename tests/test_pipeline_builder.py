import pytest

from backend.app.services.pipeline import (
    ITEMS_PER_PAGE,
    Count,
    DeriveFields,
    Filter,
    Flatten,
    GroupSum,
    Join,
    Limit,
    PipelineKind,
    Project,
    Skip,
    Sort,
    base_collection,
    build_pipeline,
    invoice_search_stages,
    page_offset,
    render_pipeline,
)
from backend.app.services.search import build_search_pattern


def stage_types(stages):
    return [type(stage) for stage in stages]


def test_invoice_list_without_query_has_no_filter():
    stages = build_pipeline(PipelineKind.INVOICE_LIST, None, page=1)
    assert stage_types(stages) == [Join, Flatten, DeriveFields, Sort, Skip, Limit, Project]


def test_invoice_list_filters_after_join_and_before_paging():
    pattern = build_search_pattern("evil")
    stages = build_pipeline(PipelineKind.INVOICE_LIST, pattern, page=2)
    assert stage_types(stages) == [Join, Flatten, DeriveFields, Filter, Sort, Skip, Limit, Project]
    assert stages[3] == Filter(
        pattern,
        ("customer.name", "customer.email", "status", "amountString", "dateString"),
    )


def test_invoice_list_paging_window():
    stages = build_pipeline(PipelineKind.INVOICE_LIST, None, page=3)
    skip = next(stage for stage in stages if isinstance(stage, Skip))
    limit = next(stage for stage in stages if isinstance(stage, Limit))
    assert ITEMS_PER_PAGE == 6
    assert skip.count == 12
    assert limit.count == 6


def test_page_offset_rejects_pages_below_one():
    assert page_offset(1) == 0
    with pytest.raises(ValueError):
        page_offset(0)
    with pytest.raises(ValueError):
        build_pipeline(PipelineKind.INVOICE_LIST, None, page=-1)


def test_invoice_list_requires_page():
    with pytest.raises(ValueError):
        build_pipeline(PipelineKind.INVOICE_LIST, None)


def test_unknown_kind_is_rejected():
    with pytest.raises(ValueError):
        build_pipeline("invoice-export")


@pytest.mark.parametrize("query", ["", "paid", "a.b", "2022"])
def test_count_uses_the_same_filter_as_the_list(query):
    pattern = build_search_pattern(query)
    list_stages = build_pipeline(PipelineKind.INVOICE_LIST, pattern, page=4)
    count_stages = build_pipeline(PipelineKind.INVOICE_COUNT, pattern)

    prefix = invoice_search_stages(pattern)
    assert list_stages[: len(prefix)] == prefix
    assert count_stages == [*prefix, Count("count")]


def test_invoice_list_renders_mongo_stages():
    pattern = build_search_pattern("evil")
    rendered = render_pipeline(build_pipeline(PipelineKind.INVOICE_LIST, pattern, page=1))

    assert rendered[0] == {
        "$lookup": {"from": "customers", "localField": "customer_id", "foreignField": "id", "as": "customer"}
    }
    assert rendered[1] == {"$unwind": "$customer"}
    assert rendered[2] == {"$addFields": {"amountString": {"$toString": "$amount"}, "dateString": "$date"}}
    assert rendered[3] == {
        "$match": {
            "$or": [
                {"customer.name": pattern},
                {"customer.email": pattern},
                {"status": pattern},
                {"amountString": pattern},
                {"dateString": pattern},
            ]
        }
    }
    assert rendered[4] == {"$sort": {"date": -1, "id": -1}}
    assert rendered[5] == {"$skip": 0}
    assert rendered[6] == {"$limit": 6}
    projection = rendered[7]["$project"]
    assert set(projection) == {"_id", "id", "amount", "date", "status", "name", "email", "image_url", "customer_id"}
    assert projection["name"] == "$customer.name"
    assert projection["customer_id"] == "$customer.id"


def test_invoice_count_renders_count_stage():
    rendered = render_pipeline(build_pipeline(PipelineKind.INVOICE_COUNT, None))
    assert rendered[-1] == {"$count": "count"}
    assert not any("$match" in stage for stage in rendered)


def test_customer_list_filters_after_rollup_projection():
    pattern = build_search_pattern("oliveira")
    stages = build_pipeline(PipelineKind.CUSTOMER_LIST, pattern)
    assert stage_types(stages) == [Join, Project, Filter, Sort]
    assert stages[0] == Join("invoices", local_field="id", foreign_field="customer_id", as_field="invoices")
    assert stages[2].fields == ("name", "email")

    rendered = render_pipeline(stages)
    projection = rendered[1]["$project"]
    assert projection["total_invoices"] == {"$size": "$invoices"}
    pending_filter = projection["total_pending"]["$sum"]["$map"]["input"]["$filter"]
    assert pending_filter["cond"] == {"$eq": ["$$invoice.status", "pending"]}
    paid_filter = projection["total_paid"]["$sum"]["$map"]["input"]["$filter"]
    assert paid_filter["cond"] == {"$eq": ["$$invoice.status", "paid"]}
    assert rendered[3] == {"$sort": {"name": 1, "id": 1}}


def test_customer_list_without_query_has_no_filter():
    stages = build_pipeline(PipelineKind.CUSTOMER_LIST, None)
    assert stage_types(stages) == [Join, Project, Sort]


def test_latest_invoices_pipeline():
    stages = build_pipeline(PipelineKind.LATEST_INVOICES)
    assert stage_types(stages) == [Join, Flatten, Sort, Limit, Project]
    assert stages[3] == Limit(5)


def test_status_totals_group_whole_collection():
    rendered = render_pipeline(build_pipeline(PipelineKind.INVOICE_STATUS_TOTALS))
    assert rendered == [
        {
            "$group": {
                "_id": None,
                "paid": {"$sum": {"$cond": [{"$eq": ["$status", "paid"]}, "$amount", 0]}},
                "pending": {"$sum": {"$cond": [{"$eq": ["$status", "pending"]}, "$amount", 0]}},
            }
        }
    ]
    assert stage_types(build_pipeline(PipelineKind.INVOICE_STATUS_TOTALS)) == [GroupSum]


def test_building_twice_gives_identical_pipelines():
    first = build_pipeline(PipelineKind.INVOICE_LIST, build_search_pattern("Lee"), page=2)
    second = build_pipeline(PipelineKind.INVOICE_LIST, build_search_pattern("Lee"), page=2)
    assert first == second
    assert render_pipeline(first) == render_pipeline(second)


def test_base_collections():
    assert base_collection(PipelineKind.INVOICE_LIST) == "invoices"
    assert base_collection(PipelineKind.INVOICE_COUNT) == "invoices"
    assert base_collection(PipelineKind.CUSTOMER_LIST) == "customers"
    assert base_collection("latest-invoices") == "invoices"
