"""
Streamlit Frontend for the Keypad Calculator

The income form's amount field, with a calculator that opens next to it.

DESIGN PRINCIPLES:
1. The keypad is the only input; nothing is evaluated while typing
2. "=" shows a short calculating state before the result
3. The result only reaches the form through an explicit "Use result"
4. Errors are shown in the display, never as crashes

Run with:
    streamlit run app/main.py
"""

import asyncio
import html
import logging

import streamlit as st

from calculator.config import get_settings, validate_all_settings
from calculator.models import (
    ERROR_SENTINEL,
    KEYPAD_LAYOUT,
    ButtonKind,
    CalculatorEventType,
    KeypadToken,
)
from calculator.orchestrator import CalculatorSession, create_calculator_session
from calculator.services.storage import InMemoryAuditStorage


# Page configuration
st.set_page_config(
    page_title="Income Calculator",
    page_icon="🧮",
    layout="centered",
    initial_sidebar_state="expanded",
)

# Custom CSS for the display panel
st.markdown("""
<style>
    .stButton>button {
        width: 100%;
    }
    .calc-display {
        padding: 16px;
        background-color: #F8F5FF;
        border-radius: 8px;
        border: 1px solid #E8DFFC;
        font-family: monospace;
    }
    .calc-input {
        color: #4b5563;
        font-size: 0.9em;
        min-height: 1.5em;
        overflow-x: auto;
        white-space: nowrap;
    }
    .calc-result {
        text-align: right;
        font-size: 1.8em;
        font-weight: bold;
        color: #1f2937;
        min-height: 1.4em;
    }
    .calc-result.error {
        color: #ef4444;
    }
    .calc-invalid {
        color: #b45309;
        font-size: 0.8em;
    }
    .shake {
        animation: shake 0.5s;
    }
    @keyframes shake {
        0%, 100% { transform: translateX(0); }
        20%, 60% { transform: translateX(-6px); }
        40%, 80% { transform: translateX(6px); }
    }
    .copy-box {
        margin-top: 8px;
        padding: 4px 8px;
        text-align: center;
        color: #16a34a;
        background-color: #f0fdf4;
        border-radius: 6px;
    }
</style>
""", unsafe_allow_html=True)


def run_async(coro):
    """Helper to run async functions in Streamlit."""
    loop = asyncio.new_event_loop()
    asyncio.set_event_loop(loop)
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@st.cache_resource
def get_audit_storage() -> InMemoryAuditStorage:
    """Audit history shared by all calculator sessions of this server."""
    return InMemoryAuditStorage()


def init_state():
    """Initialize session state."""
    if "amount" not in st.session_state:
        st.session_state.amount = ""
    if "calculator" not in st.session_state:
        st.session_state.calculator = None
    if "only_copy" not in st.session_state:
        st.session_state.only_copy = False


# -----------------------------------------------------------------------------
# Callbacks (run before the script body on the next rerun)
# -----------------------------------------------------------------------------

def open_calculator():
    def use_result(result: str):
        st.session_state.amount = result

    def close():
        st.session_state.calculator = None

    st.session_state.calculator = create_calculator_session(
        on_close=close,
        on_use_result=use_result,
        only_copy=st.session_state.only_copy,
        initial_value=st.session_state.amount.strip(),
        use_system_clipboard=True,
        audit_storage=get_audit_storage(),
    )


def press(token: KeypadToken):
    session: CalculatorSession = st.session_state.calculator
    if session is not None:
        run_async(session.handle(token))


def use_result():
    session: CalculatorSession = st.session_state.calculator
    if session is not None:
        session.use_result()


def copy_result():
    session: CalculatorSession = st.session_state.calculator
    if session is not None:
        session.copy_result()


def close_calculator():
    session: CalculatorSession = st.session_state.calculator
    if session is not None:
        session.close()


# -----------------------------------------------------------------------------
# Rendering
# -----------------------------------------------------------------------------

def main():
    """Main application entry point."""
    settings = get_settings()
    logging.basicConfig(level=settings.app.effective_log_level)

    init_state()
    render_sidebar()

    st.title("💰 Add Income")

    col1, col2 = st.columns([4, 1])
    with col1:
        st.text_input(
            "Amount",
            key="amount",
            help="Type an amount or work it out with the calculator",
        )
    with col2:
        st.markdown("<div style='height: 28px'></div>", unsafe_allow_html=True)
        st.button(
            "🧮",
            help="Open calculator",
            on_click=open_calculator,
            disabled=st.session_state.calculator is not None,
        )

    st.checkbox(
        "Copy-only calculator",
        key="only_copy",
        help="Offer 'Copy result' instead of 'Use result'",
        disabled=st.session_state.calculator is not None,
    )

    if st.session_state.calculator is not None:
        render_calculator(st.session_state.calculator)


def render_calculator(session: CalculatorSession):
    """Render the display panel and keypad of an open session."""
    snap = session.snapshot()

    st.markdown("---")
    st.subheader("🧮 Calculator")

    result_text = snap.result if snap.result_visible else ""
    if snap.is_calculating:
        result_text = "…"
    result_class = "calc-result error" if snap.is_error else "calc-result"
    panel_class = "calc-display shake" if snap.is_shaking else "calc-display"
    hint = "" if snap.structurally_valid else "<div class='calc-invalid'>Unmatched ')'</div>"

    st.markdown(f"""
    <div class="{panel_class}">
        <div class="calc-input">{html.escape(snap.expression) or "&nbsp;"}</div>
        <div class="{result_class}">{html.escape(result_text) or "&nbsp;"}</div>
        {hint}
    </div>
    """, unsafe_allow_html=True)

    if get_settings().app.debug_mode and session.last_outcome is not None:
        outcome = session.last_outcome
        with st.expander("🔧 Debug"):
            st.code(outcome.canonical_expression or "", language=None)
            if outcome.error_message:
                st.caption(f"{outcome.error_kind.value}: {outcome.error_message}")

    if snap.copy_confirmed:
        st.markdown(
            "<div class='copy-box'>✅ Result copied to clipboard</div>",
            unsafe_allow_html=True,
        )

    st.markdown("")

    # Keypad: 4 columns, "0" spans two
    row: list = []
    rows = []
    width = 0
    for button in KEYPAD_LAYOUT:
        row.append(button)
        width += button.span
        if width >= 4:
            rows.append(row)
            row, width = [], 0
    if row:
        rows.append(row)

    for row in rows:
        columns = st.columns([button.span for button in row])
        for column, button in zip(columns, row):
            with column:
                st.button(
                    button.label,
                    key=f"key_{button.token.name}",
                    on_click=press,
                    args=(button.token,),
                    type="primary" if button.kind in (ButtonKind.EQUALS, ButtonKind.CLEAR) else "secondary",
                )

    st.button(
        "⌫ Backspace",
        key="key_BACKSPACE",
        on_click=press,
        args=(KeypadToken.BACKSPACE,),
    )

    if snap.copy_only and snap.can_copy:
        st.button("📋 Copy result", on_click=copy_result, type="primary")
    if snap.can_use_result:
        st.button("✅ Use result and close", on_click=use_result, type="primary")

    st.button("✖ Close calculator", on_click=close_calculator)


def render_sidebar():
    """Settings status and recent calculator activity."""
    st.sidebar.title("🧮 Calculator")
    st.sidebar.markdown("---")

    status = validate_all_settings()
    for name in ("calculator", "app"):
        if status.get(name):
            st.sidebar.markdown(f"✅ **{name}** settings loaded")
        else:
            st.sidebar.markdown(f"❌ **{name}**: {status.get(f'{name}_error', 'invalid')}")

    app_settings = get_settings().app
    st.sidebar.markdown(f"**Environment:** {app_settings.app_environment}")

    calc_settings = get_settings().calculator
    st.sidebar.caption(
        f"Settle delay {calc_settings.settle_delay_ms} ms · "
        f"{calc_settings.result_decimal_places} decimals"
    )

    st.sidebar.markdown("---")
    st.sidebar.subheader("Recent results")
    events = get_audit_storage().get_events(limit=50)
    shown = 0
    for event in reversed(events):
        if event.event_type == CalculatorEventType.EVALUATION_SUCCEEDED:
            st.sidebar.markdown(f"`{event.details['expression']}` = **{event.details['result']}**")
        elif event.event_type == CalculatorEventType.EVALUATION_FAILED:
            st.sidebar.markdown(f"`{event.details['expression']}` → {ERROR_SENTINEL}")
        else:
            continue
        shown += 1
        if shown >= 10:
            break
    if shown == 0:
        st.sidebar.caption("No calculations yet")


if __name__ == "__main__":
    main()
