import argparse
import logging

def main():
    parser = argparse.ArgumentParser(description="DC motor output simulator with PID / feedforward control")
    parser.add_argument(
        "--demo",
        type=str,
        default=None,
        choices=["step_off", "step_pid", "step_ff", "step_pid_ff", "compare_modes"],
    )
    parser.add_argument("--batch", type=str, default=None, help="Run a scenarios catalog (JSON)")
    parser.add_argument("--out", type=str, default=None, help="Output directory")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.batch is not None:
        from motorsim.sim.batch_scenarios import run_batch
        out_dir = run_batch(args.batch, out_dir=args.out)
        print("=== Batch scenarios finished ===")
        print(f"Catalog: {args.batch}")
        print(f"Output:  {out_dir}")
        return

    if args.demo is None:
        print("Nothing to do. Use --demo <name> or --batch <catalog>.")
        return

    from motorsim.sim.simulator import run_mode_demo, run_compare_demo

    out_dir = args.out or "outputs"
    if args.demo == "compare_modes":
        run_compare_demo(out_dir)
    else:
        run_mode_demo(args.demo[len("step_"):], out_dir)

if __name__ == "__main__":
    main()
