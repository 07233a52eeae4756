"""
Chaos trace generator tests
"""
import pandas as pd
import pytest

from kubequest.simulation.trace import ACTION_ADD_POD, ACTION_CRASH_NODE, TRACE_COLUMNS, generate_trace


class TestGenerateTrace:

    def test_same_seed_same_trace(self):
        pd.testing.assert_frame_equal(generate_trace(300, seed=7), generate_trace(300, seed=7))

    def test_shape_and_clock(self):
        df = generate_trace(50, seed=1, step_ms=250)
        assert list(df.columns) == TRACE_COLUMNS
        assert len(df) == 50
        assert df['Timestamp_ms'].tolist() == [250 * (i + 1) for i in range(50)]

    def test_counters_never_decrease(self):
        df = generate_trace(500, seed=3)
        assert df['Cluster_Full_Total'].is_monotonic_increasing
        assert df['Dropped_Pods_Total'].is_monotonic_increasing
        assert (df['Free_Slots'] >= 0).all()

    def test_pods_only_scenario_fills_cluster(self):
        df = generate_trace(12, seed=0, action_probabilities={ACTION_ADD_POD: 1.0})
        last = df.iloc[-1]
        assert last['Num_Pods_Running'] == 8
        assert last['Free_Slots'] == 0
        assert last['Cluster_Full_Total'] == 4

    def test_crashes_empty_the_cluster(self):
        df = generate_trace(10, seed=0, action_probabilities={ACTION_CRASH_NODE: 1.0}, recovery_delay_ms=0)
        last = df.iloc[-1]
        assert last['Num_Ready_Nodes'] == 0
        assert last['Num_NotReady_Nodes'] == 2
        assert last['Pending_Recoveries'] == 0

    def test_rejects_zero_weights(self):
        with pytest.raises(ValueError):
            generate_trace(5, action_probabilities={ACTION_ADD_POD: 0.0})
