"""Streamlit operator console for the studio: bookings, availability, inquiries."""

from __future__ import annotations

import datetime
from typing import Any

import pandas as pd
import streamlit as st

from dashboard.api_client import DashboardApiError, StudioApiClient
from inkbook.utils.config import get_settings

TIME_SLOT_LABELS = {
    "morning": "Morning (8am - 12pm)",
    "afternoon": "Afternoon (12pm - 4pm)",
    "evening": "Evening (4pm - 8pm)",
}

st.set_page_config(
    page_title="Studio Admin",
    page_icon="🗓️",
    layout="wide",
)


def get_client() -> StudioApiClient:
    if "api_client" not in st.session_state:
        settings = get_settings()
        st.session_state.api_client = StudioApiClient(
            settings.dashboard_api_url,
            timeout=settings.api_timeout_seconds,
        )
    return st.session_state.api_client


def _safe_call(label: str, func, *args: Any) -> Any:
    try:
        return func(*args)
    except DashboardApiError as exc:
        st.error(f"{label} failed: {exc}")
        return None


# ==========================================
# UI Page Functions
# ==========================================
def render_login(client: StudioApiClient) -> None:
    st.header("Admin Login")
    admin_token = st.text_input("Admin token", type="password")
    if st.button("Log in", type="primary"):
        _safe_call("Login", client.login, admin_token)
        if client.is_authenticated:
            st.success("Logged in")
            st.rerun()


def render_bookings_page(client: StudioApiClient) -> None:
    st.header("Booking Requests")
    bookings = _safe_call("Loading bookings", client.list_booking_requests)
    if not bookings:
        st.info("No booking requests yet.")
        return

    st.dataframe(pd.DataFrame(bookings), use_container_width=True)

    pending = [booking for booking in bookings if booking["status"] == "pending"]
    if not pending:
        return
    st.subheader("Pending review")
    for booking in pending:
        col_info, col_approve, col_reject = st.columns([4, 1, 1])
        col_info.write(
            f"#{booking['id']} {booking['name']} · {booking['bodyPart']} · "
            f"{booking['size']} · {booking['requestedDate']}"
        )
        if col_approve.button("Approve", key=f"approve-{booking['id']}"):
            if _safe_call("Approve", client.update_booking_status, booking["id"], "approved"):
                st.toast("Booking status updated")
                st.rerun()
        if col_reject.button("Reject", key=f"reject-{booking['id']}"):
            if _safe_call("Reject", client.update_booking_status, booking["id"], "rejected"):
                st.toast("Booking status updated")
                st.rerun()


def render_availability_page(client: StudioApiClient) -> None:
    st.header("Manage Availability")
    st.markdown("Select time slots, pick a date, then apply. Unselected slots are cleared.")

    col1, col2 = st.columns(2)
    with col1:
        target_date = st.date_input("Date", datetime.date.today())
    with col2:
        selected_slots = st.multiselect(
            "Available time slots",
            options=list(TIME_SLOT_LABELS),
            format_func=TIME_SLOT_LABELS.get,
        )

    if st.button("Apply to date", type="primary"):
        result = _safe_call(
            "Updating availability",
            client.replace_availability,
            target_date,
            selected_slots,
        )
        if result is not None:
            st.toast("Availability updated")

    records = _safe_call("Loading availability", client.list_availability)
    if records:
        frame = pd.DataFrame(records)
        calendar = frame.pivot_table(
            index="date",
            columns="timeSlot",
            values="isAvailable",
            aggfunc="max",
        ).reindex(columns=list(TIME_SLOT_LABELS))
        st.dataframe(calendar, use_container_width=True)


def render_inquiries_page(client: StudioApiClient) -> None:
    st.header("Inquiries")
    inquiries = _safe_call("Loading inquiries", client.list_inquiries)
    if not inquiries:
        st.info("No inquiries yet.")
        return
    st.dataframe(pd.DataFrame(inquiries), use_container_width=True)


# ==========================================
# Main App Router
# ==========================================
def main() -> None:
    client = get_client()
    st.sidebar.title("Studio Admin")
    st.sidebar.markdown("---")

    if not client.is_authenticated:
        render_login(client)
        return

    page = st.sidebar.radio(
        "Navigation",
        ["Booking Requests", "Availability", "Inquiries"],
    )
    st.sidebar.markdown("---")
    if st.sidebar.button("Log out"):
        _safe_call("Logout", client.logout)
        st.rerun()

    if page == "Booking Requests":
        render_bookings_page(client)
    elif page == "Availability":
        render_availability_page(client)
    elif page == "Inquiries":
        render_inquiries_page(client)


if __name__ == "__main__":
    main()
