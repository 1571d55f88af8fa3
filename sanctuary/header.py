import streamlit as st

from sanctuary.auth import sign_out


def render_global_header(ctx):
    identity = ctx.identity
    left, right = st.columns([4, 1])
    with left:
        st.markdown("<div class='page-title' style='font-size:30px'>💕 Our Private Space</div>", unsafe_allow_html=True)
        st.markdown(
            f"<div class='small-label'>Signed in as {identity.email} • {identity.role_label}</div>",
            unsafe_allow_html=True,
        )
    with right:
        if st.button("Sign Out", key="header.sign_out", use_container_width=True):
            sign_out(ctx.backend)
            st.rerun()
