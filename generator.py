# Chaos scenario trace generator for the KubeQuest cluster simulator
import argparse
import logging
import time

from kubequest.core.logging_config import setup_logging
from kubequest.simulation.trace import generate_trace

# --- Configuration ---
N_STEPS = 5000
STEP_MS = 500
SEED = 42
OUTPUT_FILENAME = 'kubequest_chaos_trace.csv'

logger = logging.getLogger("generator")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Generate a chaos trace of the cluster simulator")
    parser.add_argument("--steps", type=int, default=N_STEPS, help="Number of simulated commands")
    parser.add_argument("--step-ms", type=int, default=STEP_MS, help="Virtual time between commands")
    parser.add_argument("--seed", type=int, default=SEED, help="Random seed")
    parser.add_argument("--output", default=OUTPUT_FILENAME, help="CSV output path")
    args = parser.parse_args()

    setup_logging()
    start_time_generation = time.time()
    logger.info(f"Starting trace generation for {args.steps} steps (seed={args.seed})...")
    df = generate_trace(args.steps, seed=args.seed, step_ms=args.step_ms)
    logger.info(f"Trace generation finished in {time.time() - start_time_generation:.2f} seconds.")

    df.to_csv(args.output, index=False)
    logger.info(f"Action distribution: {df['Action'].value_counts().to_dict()}")
    if len(df):
        logger.info(f"Final state: {df.iloc[-1].to_dict()}")
    logger.info(f"Trace saved to {args.output}")
