from __future__ import annotations

from entitychat.assistant.navigation import FilterRequest, NavigationRequest


def test_get_active_view_without_context(tools):
    assert tools.get_active_view() == "No active view context available."


def test_get_active_view_list(tools, active_view):
    active_view.update("Product", is_list_view=True, view_id="Product_ListView")

    result = tools.get_active_view()

    assert result.splitlines() == [
        "The user is currently viewing: **Product** (List View)",
        "View ID: Product_ListView",
        "Available properties for filtering: name, unit_price, units_in_stock, discontinued",
        "Relationships (can filter by): category, supplier",
    ]


def test_get_active_view_detail_includes_current_record(tools, active_view):
    active_view.update("Product", is_list_view=False, object_key="1", object_display="Chai")

    lines = tools.get_active_view().splitlines()

    assert lines[0] == "The user is currently viewing: **Product** (Detail View)"
    assert lines[1] == "View ID: N/A"
    assert lines[2] == "Current record: **Chai** (key: 1)"
    assert lines[3].startswith("Fields: key: 1 | name: Chai | unit_price: 18.00")
    assert lines[4] == "Editable properties: name, unit_price, units_in_stock, discontinued"
    assert lines[5] == "Use update_entity to modify this record's fields."


def test_navigate_to_list_queues_request(tools, navigation):
    assert tools.navigate_to_list("customer") == "Navigating to Customer list view."

    assert navigation.next_navigation() == NavigationRequest("Customer")
    assert navigation.next_navigation() is None


def test_navigate_to_detail_queues_request(tools, navigation):
    result = tools.navigate_to_detail("Product", "Chai")

    assert result == "Navigating to Product record matching 'Chai'."
    request = navigation.next_navigation()
    assert request.is_detail
    assert request == NavigationRequest("Product", "Chai")


def test_navigate_to_unknown_entity_queues_nothing(tools, navigation):
    result = tools.navigate_to_list("Widget")

    assert result.startswith("Entity 'Widget' not found.")
    assert navigation.next_navigation() is None


def test_filter_active_list_requires_list_view(tools, navigation, active_view):
    active_view.update("Product", is_list_view=False, object_key="1", object_display="Chai")

    result = tools.filter_active_list("discontinued=false")

    assert result == "No active list view to filter. Use navigate_to_list first to open a list view."
    assert navigation.next_filter() is None


def test_filter_active_list_applies_normalized_criteria(tools, navigation, active_view):
    active_view.update("Product", is_list_view=True)

    result = tools.filter_active_list({"category": "Beverages", "discontinued": False})

    assert result == "Filter applied to Product list: category=Beverages;discontinued=false"
    assert navigation.next_filter() == FilterRequest("category=Beverages;discontinued=false")


def test_filter_active_list_rejects_unknown_keys(tools, navigation, active_view):
    active_view.update("Product", is_list_view=True)

    result = tools.filter_active_list("flavour=sweet")

    assert result.startswith("Property 'flavour' not found on Product.")
    assert navigation.next_filter() is None


def test_clear_active_list_filter(tools, navigation, active_view):
    assert tools.clear_active_list_filter() == "No active list view to clear filter from."

    active_view.update("Order", is_list_view=True)
    result = tools.clear_active_list_filter()

    assert result == "Filter cleared from Order list. All records are now visible."
    assert navigation.next_filter() == FilterRequest(None)
