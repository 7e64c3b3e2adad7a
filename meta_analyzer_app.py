# meta_analyzer_app.py
# Streamlit application for the SEO Meta Tag Analyzer
# Version: 2026-10-18

import logging
import traceback  # For detailed error logging
from typing import Dict, List, Optional

import pandas as pd
import streamlit as st

from meta_analyzer import (
    FIELD_LABELS,
    AnalysisReport,
    MetaAnalyzerError,
    MetadataRecord,
    analyze,
    build_report,
    export_filename,
    record_to_json,
)

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")

NOT_FOUND: str = "Not found"


# --- Presentation Helpers ---

def metadata_table(record: MetadataRecord) -> pd.DataFrame:
    """One row per metadata field, in export order, with absent values shown as 'Not found'."""
    rows: List[Dict[str, str]] = []
    for name, label in FIELD_LABELS.items():
        value: Optional[str] = getattr(record, name)
        rows.append({'Tag': label, 'Value': NOT_FOUND if value is None else value})
    return pd.DataFrame(rows, columns=['Tag', 'Value'])


def missing_banner_text(report: AnalysisReport) -> Optional[str]:
    if not report.missing_fields:
        return None
    labels: List[str] = [FIELD_LABELS[name] for name in report.missing_fields]
    return f"⚠️ Missing important tags: {', '.join(labels)}"


def render_report(report: AnalysisReport) -> None:
    record: MetadataRecord = report.record

    banner: Optional[str] = missing_banner_text(report)
    if banner:
        st.warning(banner)
    else:
        st.success("✅ All important tags (Title, Description, OG Image) are present.")

    if report.recommendations:
        st.subheader("💡 Recommendations")
        for rec in report.recommendations:
            with st.expander(rec.heading, expanded=True):
                st.markdown("\n".join(f"- {tip}" for tip in rec.tips))

    st.subheader("🏷️ Extracted Metadata")
    st.dataframe(metadata_table(record), hide_index=True, width="stretch")

    st.subheader("📦 Export")
    json_text: str = record_to_json(record)
    st.code(json_text, language="json")  # st.code renders its own copy-to-clipboard button
    st.download_button(
        "⬇️ Download JSON",
        data=json_text,
        file_name=export_filename(),
        mime="application/json",
    )


# --- Main Streamlit App ---

def main():
    st.set_page_config(page_title="SEO Meta Tag Analyzer", layout="centered")

    st.title("🔎 SEO Meta Tag Analyzer")
    st.markdown("""
        Fetch a single page and check its SEO meta tags: title, description, keywords,
        Open Graph image, canonical URL, robots and Twitter card.
        **Important tags:** Title, Description and OG Image. Missing ones come with recommendations.
    """)

    with st.form("analyze_form"):
        url_input: str = st.text_input("Webpage URL", placeholder="https://www.example.com/page")
        run_analysis: bool = st.form_submit_button("Analyze", type="primary")

    if run_analysis:
        st.session_state.pop('report', None)
        try:
            with st.spinner(f"Fetching and analyzing {url_input.strip()}..."):
                record: MetadataRecord = analyze(url_input)
            st.session_state['report'] = build_report(record)
        except MetaAnalyzerError as e:
            st.error(str(e))
        except Exception as e:
            st.error(f"An unexpected error occurred during the analysis: {e}")
            st.error(f"Traceback:\n{traceback.format_exc()}")

    # Kept across reruns so the download button does not trigger a refetch
    report: Optional[AnalysisReport] = st.session_state.get('report')
    if report is not None:
        st.markdown(f"Results for **{report.record.source_url}**")
        render_report(report)

    st.caption("Analyzes the static HTML of one page only. JavaScript-rendered tags are not seen.")


if __name__ == "__main__":
    main()
