import streamlit as st
import logging
from ui_components import setup_sidebar, init_session_state
from ui.tabs import tab_data_upload, tab_clustering, tab_export

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def main():
    st.set_page_config(layout="wide", page_title="Medoid Cluster Optimizer", page_icon="🧩")
    session = init_session_state()
    services = setup_sidebar()
    st.title("🧩 Medoid Cluster Optimizer")
    tab1, tab2, tab3 = st.tabs(["1. Data Upload", "2. Clustering", "3. Export"])
    with tab1: tab_data_upload(services, session)
    with tab2: tab_clustering(services, session)
    with tab3: tab_export(session)

if __name__ == "__main__":
    main()
