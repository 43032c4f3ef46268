"""
Streamlit Frontend for Stone Ledger

The page a site supervisor uses to log stone-breaking work and pay wages.

DESIGN PRINCIPLES:
1. Simple, clear interface
2. Explicit confirmation before anything is deleted
3. Clear error messages in simple language
4. Visual feedback for every change

The UI holds no records of its own. It calls WorkerLedger operations and
renders ledger snapshots.
"""

from datetime import datetime

import streamlit as st

from stone_ledger.config import get_settings, validate_all_settings
from stone_ledger.errors import (
    InvalidFormatError,
    InvalidInputError,
    LedgerError,
    NotFoundError,
    PersistenceFailure,
)
from stone_ledger.ledger import EXPORT_MIME_TYPE, WorkerLedger, export_ledger, import_into
from stone_ledger.notices import pop_notice, push_notice
from stone_ledger.orchestrator import create_ledger
from stone_ledger.reports import build_payment_report, format_currency, format_kg, format_weight
from stone_ledger.validation import parse_weight


# Page configuration
st.set_page_config(
    page_title="Stone Ledger",
    page_icon="🪨",
    layout="wide",
    initial_sidebar_state="expanded",
)

st.markdown("""
<style>
    .stButton>button {
        width: 100%;
        margin-top: 10px;
    }
    .big-number {
        font-size: 2.5em;
        font-weight: bold;
        color: #2c3e50;
    }
</style>
""", unsafe_allow_html=True)


@st.cache_resource
def get_ledger() -> WorkerLedger:
    """Get or create the application ledger (cached)."""
    try:
        return create_ledger(use_storage=True)
    except PersistenceFailure as e:
        st.error(f"Could not open the data file, working in memory only: {e}")
        return create_ledger(use_storage=False)


def show_error(error: LedgerError) -> None:
    """Map a ledger error kind to a user-facing message."""
    if isinstance(error, InvalidInputError):
        st.error(f"Please check your input: {error}")
    elif isinstance(error, NotFoundError):
        st.warning("That entry no longer exists. The list has been refreshed.")
    elif isinstance(error, InvalidFormatError):
        st.error(f"Invalid file format: {error}")
        for issue in error.issues[:10]:
            st.markdown(f"- {issue}")
    elif isinstance(error, PersistenceFailure):
        st.error(f"Could not save your changes: {error}")
    else:
        st.error(str(error))


def show_notice() -> None:
    """Show the confirmation queued before the last rerun."""
    notice = pop_notice(st.session_state)
    if notice is not None:
        getattr(st, notice.level)(notice.message)


def main():
    """Main application entry point."""
    ledger = get_ledger()
    symbol = get_settings().ledger.currency_symbol

    show_notice()

    st.sidebar.title("🪨 Stone Ledger")
    st.sidebar.markdown("---")

    page = st.sidebar.radio(
        "Navigate to:",
        ["➕ Add Work", "👷 Workers", "💰 Payments", "⚙️ Settings"],
        index=0,
    )

    st.sidebar.markdown("---")
    st.sidebar.markdown(
        f"""
        **Rate:** {format_currency(ledger.rate_per_kg, symbol)} per kg

        **How to use:**
        1. Enter the worker's name and the weight broken
        2. Check the payment preview
        3. Save
        """
    )

    render_stats(ledger, symbol)

    if page == "➕ Add Work":
        render_add_page(ledger, symbol)
    elif page == "👷 Workers":
        render_workers_page(ledger, symbol)
    elif page == "💰 Payments":
        render_payments_page(ledger, symbol)
    elif page == "⚙️ Settings":
        render_settings_page(ledger)


def render_stats(ledger: WorkerLedger, symbol: str):
    stats = ledger.stats()
    col1, col2, col3 = st.columns(3)
    col1.metric("Entries", stats.count)
    col2.metric("Total stones (kg)", format_weight(stats.total_stones))
    col3.metric("Total payment", format_currency(stats.total_payment, symbol))
    st.markdown("---")


def render_add_page(ledger: WorkerLedger, symbol: str):
    """Render the work entry form."""
    st.title("➕ Add Work")

    name = st.text_input("Worker name *", placeholder="e.g. Asha")
    stones = st.number_input(
        "Stones broken (kg) *",
        min_value=0.0,
        step=0.5,
        format="%.2f",
    )

    st.markdown(f"**Estimated payment:** {format_currency(ledger.preview_payment(stones), symbol)}")

    if st.button("✅ Save", type="primary"):
        try:
            record = ledger.add(name, stones)
        except LedgerError as e:
            show_error(e)
        else:
            push_notice(st.session_state, f"{record.name} added: {format_kg(record.stones_broken)} kg, "
                                          f"{format_currency(record.payment, symbol)}")
            st.rerun()


def render_workers_page(ledger: WorkerLedger, symbol: str):
    """Render the list of entries with edit and delete actions."""
    st.title("👷 Workers")

    records = ledger.snapshot()
    if not records:
        st.info("No workers added yet.")
        return

    for record in records:
        with st.container(border=True):
            col1, col2, col3 = st.columns([3, 2, 1])
            with col1:
                st.markdown(f"**{record.name}**")
                st.caption(f"Date: {record.date_added}")
            with col2:
                st.markdown(f"Stones: {format_kg(record.stones_broken)} kg")
                st.markdown(f"Payment: {format_currency(record.payment, symbol)}")
            with col3:
                confirm = st.checkbox("Confirm", key=f"confirm-{record.id}")
                if st.button("🗑️ Delete", key=f"delete-{record.id}", disabled=not confirm):
                    try:
                        removed = ledger.remove(record.id)
                    except LedgerError as e:
                        show_error(e)
                    else:
                        if removed:
                            push_notice(st.session_state, f"{record.name} deleted")
                        st.rerun()

            with st.expander("✏️ Edit weight"):
                new_weight = st.text_input(
                    "New weight (kg)",
                    value=format_kg(record.stones_broken),
                    key=f"weight-{record.id}",
                )
                if st.button("Save weight", key=f"update-{record.id}"):
                    try:
                        updated = ledger.update(record.id, parse_weight(new_weight))
                    except LedgerError as e:
                        show_error(e)
                    else:
                        push_notice(st.session_state, f"{updated.name}'s weight updated")
                        st.rerun()


def render_payments_page(ledger: WorkerLedger, symbol: str):
    """Render the payment table, export/import and the printable report."""
    st.title("💰 Payments")

    records = ledger.snapshot()
    if records:
        st.table([
            {
                "No.": serial,
                "Name": record.name,
                "Stones (kg)": format_kg(record.stones_broken),
                "Payment": format_currency(record.payment, symbol),
            }
            for serial, record in enumerate(records, start=1)
        ])
    else:
        st.info("No data")

    settings = get_settings().ledger
    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            "📊 Export data",
            data=export_ledger(ledger),
            file_name=settings.export_filename,
            mime=EXPORT_MIME_TYPE,
        )
    with col2:
        today = datetime.now(settings.tzinfo).date()
        st.download_button(
            "🖨️ Payment report",
            data=build_payment_report(records, today, ledger.stats(), symbol),
            file_name=f"wage_report_{today.isoformat()}.html",
            mime="text/html",
        )

    st.markdown("---")
    st.subheader("Import data")
    uploaded = st.file_uploader("Choose an exported JSON file", type=["json"])
    if uploaded is not None and st.button("📥 Replace all entries with this file"):
        try:
            count = import_into(ledger, uploaded.getvalue())
        except LedgerError as e:
            show_error(e)
        else:
            push_notice(st.session_state, f"Imported {count} entries")
            st.rerun()

    st.markdown("---")
    st.subheader("Clear all data")
    if st.checkbox("I understand this deletes every entry"):
        if st.button("🧹 Clear all data"):
            try:
                removed = ledger.clear()
            except LedgerError as e:
                show_error(e)
            else:
                push_notice(st.session_state, f"Cleared {removed} entries")
                st.rerun()


def render_settings_page(ledger: WorkerLedger):
    """Render the settings page."""
    st.title("⚙️ Settings")

    status = validate_all_settings()
    for name, key in [("Ledger", "ledger"), ("Application", "app")]:
        if status.get(key, False):
            st.success(f"✅ {name} settings - OK")
        else:
            st.error(f"❌ {name} settings - {status.get(f'{key}_error', 'Invalid')}")

    settings = get_settings().ledger
    st.markdown("### Configuration")
    st.markdown(f"- Rate per kg: `{ledger.rate_per_kg}`")
    st.markdown(f"- Data file: `{settings.data_file}`")
    st.markdown(f"- Timezone: `{settings.timezone}`")
    st.markdown(
        "Override any of these with `STONE_LEDGER_*` environment variables "
        "or a `.env` file."
    )


if __name__ == "__main__":
    main()
