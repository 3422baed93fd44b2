"""
Export tab for the Medoid Cluster Optimizer Streamlit app.
Handles exporting clustering results to CSV, Excel and JSON.
"""
import streamlit as st
import pandas as pd
from io import BytesIO
import traceback
from session_manager import SessionManager
from calculations.cluster_service import result_to_json
import shared.utils as utils


def tab_export(session: SessionManager) -> None:
    """Handle the export results tab functionality."""
    st.header("Export")
    result = session.get('result')
    if not result or 'error' in result:
        st.warning("No clustering result to export.")
        return

    try:
        clusters = result.get('chosen_clusters') or []
        members_df = utils.clusters_to_dataframe(clusters)
        metrics_df = utils.metrics_to_dataframe(result.get('all_metrics') or [])

        if members_df.empty:
            st.warning("No clusters to export.")
        else:
            st.dataframe(members_df, width="stretch")
            csv = members_df.to_csv(index=False, encoding='utf-8-sig')
            st.download_button("Download Clusters (CSV)", csv, "clusters.csv", "text/csv")

            output = BytesIO()
            with pd.ExcelWriter(output, engine='openpyxl') as writer:
                members_df.to_excel(writer, index=False, sheet_name='Clusters')
                metrics_df.to_excel(writer, index=False, sheet_name='Metrics')
            output.seek(0)

            st.download_button(
                "Download Clusters (Excel)",
                output.getvalue(),
                "clusters.xlsx",
                "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
                key='download-excel'
            )

        st.download_button("Download Full Result (JSON)", result_to_json(result), "clustering_result.json",
                           "application/json", key='download-json')

    except Exception as e:
        st.error(f"Export Error: {str(e)}")
        st.code(traceback.format_exc())
