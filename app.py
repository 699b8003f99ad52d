import logging

import streamlit as st
import pandas as pd
import plotly.express as px

from components.benchmark import BenchConfig, OPS, run_benchmark, summarize
from components.work_loads import KINDS
from stringsets.registry import BACKENDS, create_empty

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

# Configure page
st.set_page_config(
    page_title="Prefix Set Bench",
    page_icon="🌳",
    layout="wide",
    initial_sidebar_state="expanded"
)

st.title("🌳 Prefix Set Bench")
st.markdown("---")

# Sidebar
with st.sidebar:
    st.header("Navigation")
    page = st.selectbox("Choose a section:", ["Benchmark", "Prefix Explorer"])

    st.markdown("---")
    st.subheader("Workload")
    workload = st.selectbox("Kind", KINDS)
    num_keys = st.number_input("Keys", min_value=100, max_value=200_000, value=5_000, step=1_000)
    num_queries = st.number_input("Queries", min_value=100, max_value=200_000, value=2_000, step=500)
    prefix_freq = st.slider("Prefix frequency (words)", 0.0, 1.0, 0.5)
    hit_ratio = st.slider("Query hit ratio", 0.0, 1.0, 0.5)
    repeat = st.number_input("Repeats", min_value=1, max_value=20, value=3)
    seed = st.number_input("Seed", min_value=0, value=42)
    backends = st.multiselect("Backends", list(BACKENDS), default=list(BACKENDS))


if page == "Benchmark":
    st.header("📊 Backend timings")

    if st.button("▶️ Run benchmark"):
        try:
            config = BenchConfig(
                workload=workload, num_keys=int(num_keys), num_queries=int(num_queries),
                prefix_freq=prefix_freq, hit_ratio=hit_ratio, repeat=int(repeat),
                seed=int(seed), backends=tuple(backends),
            )
            with st.spinner("Timing backends..."):
                st.session_state['results'] = run_benchmark(config)
        except (ValueError, RuntimeError) as e:
            st.error(f"❌ Benchmark failed: {e}")

    if 'results' in st.session_state:
        df = st.session_state['results']
        summary = summarize(df)

        col1, col2 = st.columns(2)
        with col1:
            st.write("**Summary (µs per op):**")
            st.dataframe(summary)
        with col2:
            st.write("**Node counts:**")
            nodes = summary.drop_duplicates("backend")[["backend", "nodes"]]
            st.plotly_chart(px.bar(nodes, x="backend", y="nodes", title="Nodes per backend"),
                            use_container_width=True)

        fig = px.bar(summary, x="op", y="median_us", color="backend", barmode="group",
                     category_orders={"op": list(OPS)}, title="Median latency per operation")
        fig.update_layout(xaxis_title="Operation", yaxis_title="µs per op")
        st.plotly_chart(fig, use_container_width=True)

        with st.expander("Raw runs"):
            st.dataframe(df, use_container_width=True)
    else:
        st.info("👈 Pick a workload and press Run")

elif page == "Prefix Explorer":
    st.header("🔍 Prefix Explorer")

    text = st.text_area("Keys (one per line)", "team\ntea\nboat\nbo\napp\napple")
    query = st.text_input("Query", "teammate")
    backend = st.selectbox("Backend", list(BACKENDS))

    keys = [k for k in text.splitlines() if k]
    s = create_empty(backend)
    for k in keys:
        s.insert(k)

    col1, col2, col3 = st.columns(3)
    col1.metric("Stored keys", s.size())
    col2.metric("Nodes", s.count_nodes())
    col3.metric("Avg branching", f"{s.count_nodes(get_avg_branch_factor=True):.2f}")

    if query:
        fam = s.prefixes_of(query)
        st.write(f"**Members that are prefixes of** `{query}`:")
        st.dataframe(pd.DataFrame({"key": fam, "length": [len(k) for k in fam]}))
        st.write(f"**Longest prefix match:** `{s.longest_prefix_of(query)}`")
        st.write(f"**Members starting with** `{query}`: {sorted(s.starting_with(query))}")
        st.write(f"**Contains:** {s.contains(query)}")
    s.destroy()

# Footer
st.markdown("---")
st.markdown(
    """
    <div style='text-align: center; color: #B0B0B0; padding: 1rem;'>
        Built with Streamlit 🚀 | Prefix Set Bench
    </div>
    """,
    unsafe_allow_html=True
)
