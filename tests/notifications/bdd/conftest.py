"""Shared BDD fixtures and step definitions for Notifications."""

from pytest_bdd import given, parsers, then

from partstore.notifications.fanout import notify
from partstore.notifications.queries import inbox

CUSTOMER_ID = "cust-001"


@given(parsers.cfparse("the customer has {count:d} unread notifications"), target_fixture="notification_ids")
def unread_notifications(count):
    return [
        str(notify(CUSTOMER_ID, "general", f"Notice {i}", f"Message {i}").id)
        for i in range(count)
    ]


@then(parsers.cfparse("the customer has {count:d} unread notification"))
def unread_singular(count):
    assert inbox(CUSTOMER_ID, "User")[1] == count


@then(parsers.cfparse("the customer has {count:d} unread notifications"))
def unread_plural(count):
    assert inbox(CUSTOMER_ID, "User")[1] == count


@then(parsers.cfparse("the customer has {count:d} notification left"))
def notifications_left(count):
    assert inbox(CUSTOMER_ID, "User")[0].total == count
