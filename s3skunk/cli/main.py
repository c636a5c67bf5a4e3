"""
Command line entry point for the s3skunk download benchmark.
"""

import argparse
import logging
import os
import sys
from dataclasses import replace

import uvloop

from s3skunk.common.errors import BenchmarkError
from s3skunk.configuration import (
    DEFAULT_COMPRESSION,
    DEFAULT_COUNT,
    DEFAULT_DIAGNOSTICS_PORT,
    DEFAULT_DOWNLOAD_MIB,
    DEFAULT_ENVIRONMENT,
    DEFAULT_FILE_SET,
    DEFAULT_OUTPUT_DIR,
    DEFAULT_PLOTS_DIR,
    DEFAULT_SWEEP_COUNT,
    DEFAULT_UPLOAD_CONCURRENCY,
    FILE_SET_SIZES,
    MiB,
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool = False):
    """Configure root logging once; logs go to stderr, records to stdout."""
    if not logging.root.handlers:
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.INFO,
            format="%(asctime)s - %(levelname)s - %(message)s",
        )


class S3SkunkCLI:
    """CLI for running and analysing object storage download benchmarks."""

    def __init__(self):
        self.parser = self._create_parser()

    @staticmethod
    def _add_storage_arguments(parser):
        parser.add_argument('--storage', choices=['s3', 'r2'], default='s3',
                            help='Storage type to use (default: s3)')
        parser.add_argument('--bucket', type=str, default=None,
                            help='Bucket holding the file sets (default: $BUCKET_NAME)')
        parser.add_argument('--prefix', type=str, default=None,
                            help='Key prefix above the file set directories (default: $S3_PREFIX)')

    @staticmethod
    def _add_run_arguments(parser):
        parser.add_argument('--instance', type=str, default=DEFAULT_ENVIRONMENT,
                            help="Environment label, e.g. EC2 instance type; 'auto' asks instance metadata")
        parser.add_argument('--compression', type=float, default=DEFAULT_COMPRESSION,
                            help=f'Latency digest compression (default: {DEFAULT_COMPRESSION:g})')
        parser.add_argument('--diagnostics-port', type=int, default=DEFAULT_DIAGNOSTICS_PORT,
                            help=f'Loopback diagnostics port, 0 disables (default: {DEFAULT_DIAGNOSTICS_PORT})')

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            prog='s3skunk',
            description='Object storage download benchmark',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Upload the 64 KiB file set
  s3skunk generate --bucket my-bucket --sets K064

  # One datapoint: 256 MiB of 1 MiB objects with 64 workers
  s3skunk run --bucket my-bucket --set M001 --download 256 --workers 64

  # Full experiment table, 20 datapoints per configuration
  s3skunk sweep --bucket my-bucket --instance auto --output-dir results

  # Aggregate and plot the collected datapoints
  s3skunk summarize results/*.out
  s3skunk plot results/*.out --output-dir plots
            """
        )
        parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        # Run command
        run_parser = subparsers.add_parser('run', help='Generate benchmark datapoints')
        run_parser.add_argument('--count', type=int, default=DEFAULT_COUNT,
                                help=f'Number of datapoints to generate (default: {DEFAULT_COUNT})')
        run_parser.add_argument('--workers', type=int, default=None,
                                help='Parallel downloads (default: number of CPUs)')
        run_parser.add_argument('--set', dest='file_set', choices=sorted(FILE_SET_SIZES),
                                default=DEFAULT_FILE_SET,
                                help=f'File set to download (default: {DEFAULT_FILE_SET})')
        run_parser.add_argument('--download', type=int, default=DEFAULT_DOWNLOAD_MIB,
                                help=f'Total size to download in MiB (default: {DEFAULT_DOWNLOAD_MIB})')
        self._add_storage_arguments(run_parser)
        self._add_run_arguments(run_parser)

        # Sweep command
        sweep_parser = subparsers.add_parser('sweep', help='Run the file set x worker count table')
        sweep_parser.add_argument('--count', type=int, default=DEFAULT_SWEEP_COUNT,
                                  help=f'Datapoints per configuration (default: {DEFAULT_SWEEP_COUNT})')
        sweep_parser.add_argument('--sets', nargs='+', choices=sorted(FILE_SET_SIZES),
                                  help='Restrict the sweep to these file sets')
        sweep_parser.add_argument('--output-dir', type=str, default=DEFAULT_OUTPUT_DIR,
                                  help=f'Directory for <SET>.out files (default: {DEFAULT_OUTPUT_DIR})')
        self._add_storage_arguments(sweep_parser)
        self._add_run_arguments(sweep_parser)

        # Generate command
        generate_parser = subparsers.add_parser('generate', help='Upload file set objects')
        generate_parser.add_argument('--sets', nargs='+', choices=sorted(FILE_SET_SIZES),
                                     default=sorted(FILE_SET_SIZES),
                                     help='File sets to generate (default: all)')
        generate_parser.add_argument('--dataset-mib', type=int, default=None,
                                     help='Volume per file set in MiB (default: 1 GiB for K sets, 10 GiB for M sets)')
        generate_parser.add_argument('--concurrency', type=int, default=DEFAULT_UPLOAD_CONCURRENCY,
                                     help=f'Concurrent uploads (default: {DEFAULT_UPLOAD_CONCURRENCY})')
        self._add_storage_arguments(generate_parser)

        # Summarize command
        summarize_parser = subparsers.add_parser('summarize', help='Aggregate datapoint files')
        summarize_parser.add_argument('files', nargs='+', help='JSON-lines datapoint files')
        summarize_parser.add_argument('--parquet', type=str, default=None,
                                      help='Also write the summary to this Parquet file')

        # Plot command
        plot_parser = subparsers.add_parser('plot', help='Plot datapoint files')
        plot_parser.add_argument('files', nargs='+', help='JSON-lines datapoint files')
        plot_parser.add_argument('--output-dir', type=str, default=DEFAULT_PLOTS_DIR,
                                 help=f'Output directory for plots (default: {DEFAULT_PLOTS_DIR})')

        return parser

    def _start_diagnostics(self, port: int):
        if port <= 0:
            return None
        from s3skunk.observability.prom import DiagnosticsExporter

        exporter = DiagnosticsExporter(port)
        exporter.start_server()
        return exporter

    async def run_benchmark(self, args):
        """Run the benchmark ``--count`` times, one record per run on stdout."""
        from s3skunk.cli.benchmark import BenchmarkRunner
        from s3skunk.common.run_config import build_run_config
        from s3skunk.common.storage_factory import create_storage_system
        from s3skunk.ec2.ec2 import default_worker_count, resolve_environment

        config = build_run_config(
            file_set_label=args.file_set,
            download_mib=args.download,
            workers=args.workers if args.workers is not None else default_worker_count(),
            count=args.count,
            environment=args.instance,
            bucket=args.bucket,
            prefix=args.prefix,
            storage=args.storage,
            compression=args.compression,
        )
        # Metadata lookup only after the parameters are known to be valid
        config = replace(config, environment=resolve_environment(config.environment))
        self._start_diagnostics(args.diagnostics_port)

        storage_system = create_storage_system(
            config.storage, config.bucket, max_connections=config.workers)
        async with storage_system:
            runner = BenchmarkRunner(config, storage_system)
            await runner.run()
        return 0

    async def run_sweep(self, args):
        """Run every configuration of the sweep table."""
        from s3skunk.cli.sweep import SweepRunner, plan_sweep
        from s3skunk.common.storage_factory import create_storage_system
        from s3skunk.ec2.ec2 import resolve_environment

        plan = plan_sweep(
            count=args.count,
            environment=args.instance,
            sets=args.sets,
            bucket=args.bucket,
            prefix=args.prefix,
            storage=args.storage,
            compression=args.compression,
        )
        environment = resolve_environment(args.instance)
        plan = [replace(config, environment=environment) for config in plan]
        self._start_diagnostics(args.diagnostics_port)

        max_workers = max(config.workers for config in plan)
        storage_system = create_storage_system(
            plan[0].storage, plan[0].bucket, max_connections=max_workers)
        async with storage_system:
            runner = SweepRunner(plan, storage_system, args.output_dir)
            await runner.run()
        return 0

    async def run_generate(self, args):
        """Upload the objects of the requested file sets."""
        from s3skunk.cli.uploader import Uploader
        from s3skunk.common.errors import ConfigurationError
        from s3skunk.common.storage_factory import create_storage_system
        from s3skunk.configuration import BUCKET_NAME, S3_PREFIX

        bucket = args.bucket if args.bucket is not None else BUCKET_NAME
        if not bucket:
            raise ConfigurationError("no bucket configured (use --bucket or set BUCKET_NAME)")
        if args.concurrency < 1:
            raise ConfigurationError(f"concurrency ({args.concurrency}) must be at least 1")
        prefix = args.prefix if args.prefix is not None else S3_PREFIX
        dataset_bytes = args.dataset_mib * MiB if args.dataset_mib else None

        storage_system = create_storage_system(
            args.storage, bucket, max_connections=args.concurrency)
        async with storage_system:
            uploader = Uploader(storage_system, prefix, concurrency=args.concurrency)
            total = await uploader.upload_file_sets(args.sets, dataset_bytes)
        logger.info(f"Generated {total} objects")
        return 0

    def run_summarize(self, args):
        """Print aggregated datapoints as a table."""
        from s3skunk.persistence.summary import load_datapoints, save_summary, summarize_datapoints

        missing = [path for path in args.files if not os.path.exists(path)]
        if missing:
            logger.error(f"Datapoint files not found: {', '.join(missing)}")
            return 1

        summary = summarize_datapoints(load_datapoints(args.files))
        if len(summary) == 0:
            logger.error("No datapoints found")
            return 1

        print(summary.to_string(index=False, float_format=lambda v: f"{v:.4f}"))
        save_summary(summary, args.parquet)
        return 0

    def run_plot(self, args):
        """Create scaling plots from datapoint files."""
        from s3skunk.persistence.summary import load_datapoints
        from s3skunk.visualizations.scaling_plots import ScalingPlotter

        missing = [path for path in args.files if not os.path.exists(path)]
        if missing:
            logger.error(f"Datapoint files not found: {', '.join(missing)}")
            return 1

        plotter = ScalingPlotter(load_datapoints(args.files), args.output_dir)
        plots = plotter.create_all_plots()
        if not plots:
            logger.error("No plots were created")
            return 1

        logger.info(f"Successfully created {len(plots)} plots in {args.output_dir}")
        for plot in plots:
            logger.info(f"  - {plot}")
        return 0

    def run(self, args=None):
        """Run the CLI with the given arguments and return the exit status."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)
        setup_logging(parsed_args.verbose)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            if parsed_args.command == 'run':
                return uvloop.run(self.run_benchmark(parsed_args))
            elif parsed_args.command == 'sweep':
                return uvloop.run(self.run_sweep(parsed_args))
            elif parsed_args.command == 'generate':
                return uvloop.run(self.run_generate(parsed_args))
            elif parsed_args.command == 'summarize':
                return self.run_summarize(parsed_args)
            elif parsed_args.command == 'plot':
                return self.run_plot(parsed_args)
            else:
                logger.error(f"Unknown command: {parsed_args.command}")
                return 1

        except BenchmarkError as e:
            logger.error(f"error: {e}")
            return 1
        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1
        except Exception as e:
            logger.error(f"Unexpected error: {e}", exc_info=True)
            return 1


def main():
    """Main entry point."""
    cli = S3SkunkCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
