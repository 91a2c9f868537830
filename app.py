# app.py

import streamlit as st
from agents.field_assistant import FieldAssistant
from core.activity_logger import ActivityLogger
from core.auth_service import AuthService
from core.chat_log_manager import ChatLogManager
from core.chat_session import ChatSession
from core.dashboard import DashboardService
from core.errors import AuthError, FieldDataError, InvalidFilterError, StoreError, ValidationError
from core.export_serializer import MIME_TYPES, export_filename, serialize
from core.field_data_service import FieldDataService, RecordsBrowser
from core.models import FilterCriteria
from core.record_store import RecordStore
from tools.geocoding_api import get_coordinates_for_location

# --- Page & State Configuration ---
st.set_page_config(page_title="Field Data Assistant", page_icon="🌱", layout="wide")

PAGES = ["Dashboard", "Collect Data", "Records", "Assistant"]

def initialize_session_state():
    """Initializes all necessary session state variables."""
    if "session" not in st.session_state:
        st.session_state.session = None
    if "page" not in st.session_state:
        st.session_state.page = PAGES[0]
    if "location_input" not in st.session_state:
        st.session_state.location_input = ""

    # Initialize services once
    if "auth_service" not in st.session_state:
        st.session_state.auth_service = AuthService()
    if "record_store" not in st.session_state:
        store = RecordStore()
        st.session_state.record_store = store
        st.session_state.field_data_service = FieldDataService(store, ActivityLogger(store))
        st.session_state.chat_log_manager = ChatLogManager(store)
        st.session_state.dashboard_service = DashboardService(store)
        st.session_state.assistant = FieldAssistant()

def reset_user_state():
    for key in ("records_browser", "chat_session"):
        st.session_state.pop(key, None)

# --- Authentication Logic ---
def show_login_signup_page():
    """Displays the sign-in and sign-up forms."""
    st.title("Field Data Assistant 🌱")

    login_tab, signup_tab = st.tabs(["Sign In", "Sign Up"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email", key="login_email")
            password = st.text_input("Password", type="password", key="login_password")
            submitted = st.form_submit_button("Sign In")
            if submitted:
                try:
                    st.session_state.session = st.session_state.auth_service.sign_in(email, password)
                    reset_user_state()
                    st.success("Signed in successfully!")
                    st.rerun()
                except AuthError as e:
                    st.error(str(e))

    with signup_tab:
        with st.form("signup_form"):
            new_email = st.text_input("Email", key="signup_email")
            new_username = st.text_input("Username", key="signup_username")
            new_password = st.text_input("Password", type="password", key="signup_password")
            submitted = st.form_submit_button("Sign Up")
            if submitted:
                try:
                    st.session_state.auth_service.sign_up(new_email, new_password, new_username)
                    st.success("Account created! Please sign in.")
                except AuthError as e:
                    st.error(str(e))

# --- Pages ---
def show_dashboard():
    session = st.session_state.session
    st.title("Dashboard")
    st.caption("Overview of your field data collection")

    stats = st.session_state.dashboard_service.load(session)
    if stats.sync_status == "error":
        st.error("Could not load dashboard data from the record store.")

    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Records", stats.total_records)
    col2.metric("Today's Records", stats.today_records)
    col3.metric("Sync Status", stats.sync_status.capitalize())
    col4.metric("Last Sync", stats.last_sync.strftime("%H:%M:%S"))

    left, right = st.columns(2)
    with left:
        st.subheader("Recent Field Data")
        if stats.recent_fields:
            for item in stats.recent_fields:
                st.markdown(f"**{item.field}** · {item.count} records · latest `{item.last_value}`")
        else:
            st.info("No data collected yet")

    with right:
        st.subheader("Quick Actions")
        if st.button("Refresh Data"):
            st.rerun()
        try:
            records = st.session_state.field_data_service.load_records(session)
        except StoreError as e:
            st.error(f"Error exporting data: {e}")
            return
        for fmt in ("csv", "json"):
            st.download_button(
                f"Export {fmt.upper()}",
                data=serialize(records, fmt),
                file_name=export_filename(fmt),
                mime=MIME_TYPES[fmt],
                key=f"dashboard_export_{fmt}",
            )

def show_data_collection_form():
    session = st.session_state.session
    st.title("Collect Data")

    with st.expander("📍 Resolve a place to coordinates"):
        place = st.text_input("Place name", key="geocode_query")
        if st.button("Use coordinates") and place:
            result = get_coordinates_for_location(place)
            if "error" in result:
                st.warning(result["error"])
            else:
                st.session_state.location_input = result["location"]

    with st.form("data_entry_form", clear_on_submit=True):
        field = st.text_input("Field", placeholder="e.g. Soil Temperature")
        value = st.text_input("Value", placeholder="e.g. 18.5")
        location = st.text_input("Location", key="location_input", placeholder="Plot name or 'lat, lon'")
        submitted = st.form_submit_button("Save Record")
        if submitted:
            try:
                record = st.session_state.field_data_service.submit_record(session, field, value, location)
                st.success(f"Saved {record.field} = {record.value}")
                st.session_state.pop("records_browser", None)
            except ValidationError as e:
                for message in e.errors.values():
                    st.error(message)
            except StoreError as e:
                print(f"Error saving record: {e}")
                st.error("Failed to save record. Please try again.")

def show_records_view():
    session = st.session_state.session
    if "records_browser" not in st.session_state:
        browser = RecordsBrowser(st.session_state.field_data_service, session)
        try:
            browser.load()
        except StoreError as e:
            st.error(f"Error loading records: {e}")
        st.session_state.records_browser = browser
    browser: RecordsBrowser = st.session_state.records_browser

    st.title("Records")

    search_term = st.text_input("Search records...", value=browser.criteria.search_term)
    with st.expander("Filters"):
        c1, c2, c3, c4 = st.columns(4)
        field = c1.text_input("Field", value=browser.criteria.field)
        location = c2.text_input("Location", value=browser.criteria.location)
        date_from = c3.text_input("From Date (YYYY-MM-DD)", value=browser.criteria.date_from)
        date_to = c4.text_input("To Date (YYYY-MM-DD)", value=browser.criteria.date_to)
        if st.button("Clear Filters"):
            browser.clear_filters()
            st.rerun()

    criteria = FilterCriteria(
        search_term=search_term, field=field, location=location, date_from=date_from, date_to=date_to
    )
    try:
        visible = browser.apply(criteria)
    except InvalidFilterError as e:
        st.error(str(e))
        visible = browser.visible

    st.caption(f"Showing {len(visible)} of {len(browser.records)} records")
    filename, content = browser.export("csv")
    st.download_button("Export", data=content, file_name=filename, mime=MIME_TYPES["csv"])

    if not visible:
        st.info("No records found" if not browser.records else "No records match your search criteria")
        return

    for record in visible:
        cols = st.columns([3, 3, 3, 3, 1])
        cols[0].write(record.field)
        cols[1].write(record.value)
        cols[2].write(f"📍 {record.location}")
        cols[3].write(record.timestamp.strftime("%Y-%m-%d %H:%M:%S"))
        if cols[4].button("🗑️", key=f"delete_{record.id}", help="Delete record"):
            try:
                browser.delete(record.id)
                st.rerun()
            except StoreError as e:
                st.error(f"Error deleting record: {e}")

def show_assistant():
    session = st.session_state.session
    if "chat_session" not in st.session_state:
        st.session_state.chat_session = ChatSession(
            session, st.session_state.assistant, st.session_state.chat_log_manager
        )
    chat: ChatSession = st.session_state.chat_session

    st.title("💬 AI Field Assistant")
    st.caption("Get insights and help with your field data")

    # Display existing messages
    for message in chat.messages:
        role = "human" if message.is_from_user else "ai"
        with st.chat_message(role, avatar="🧑‍🌾" if message.is_from_user else "🤖"):
            st.markdown(message.content)

    if prompt := st.chat_input("Ask about your field data..."):
        with st.chat_message("human", avatar="🧑‍🌾"):
            st.markdown(prompt)

        with st.chat_message("ai", avatar="🤖"):
            with st.spinner("Assistant is thinking..."):
                try:
                    reply = chat.send(prompt)
                    st.markdown(reply.content)
                except StoreError as e:
                    # the reply is already in the transcript; only persisting it failed
                    st.markdown(chat.messages[-1].content)
                    st.warning(f"Could not save this conversation: {e}")
                except FieldDataError as e:
                    st.error(str(e))

# --- Main Interface Logic ---
def show_main_interface():
    session = st.session_state.session
    with st.sidebar:
        st.header(f"Welcome, {session.username or session.email}!")
        st.session_state.page = st.radio("Navigate", PAGES, index=PAGES.index(st.session_state.page))

        if st.button("Sign Out"):
            st.session_state.auth_service.sign_out()
            st.session_state.session = None
            reset_user_state()
            st.rerun()

    page = st.session_state.page
    if page == "Dashboard":
        show_dashboard()
    elif page == "Collect Data":
        show_data_collection_form()
    elif page == "Records":
        show_records_view()
    else:
        show_assistant()


# --- Application Entry Point ---
initialize_session_state()

if st.session_state.session:
    show_main_interface()
else:
    show_login_signup_page()
