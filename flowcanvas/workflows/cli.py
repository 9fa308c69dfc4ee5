#!/usr/bin/env python3
"""
CLI interface for canvas workflows.

Provides commands for listing node types, validating and executing
workflow documents.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from tqdm import tqdm

from flowcanvas.engine.executor import WorkflowExecutor
from flowcanvas.engine.graph import GraphError
from flowcanvas.engine.sink import StatusSink
from flowcanvas.nodes.base import NodeStatus
from flowcanvas.nodes.registry import get_registry
from flowcanvas.utils.common import load_json, print_section, save_json
from flowcanvas.workflows.serialization import WorkflowSerializer


class ProgressSink(StatusSink):
    """Progress bar advancing as nodes finish"""

    def __init__(self, total: int):
        self.bar = tqdm(total=total, unit="node", desc="Running")

    async def node_updated(self, node_id, status, result=None, error=None):
        if status in (NodeStatus.SUCCESS, NodeStatus.ERROR) and self.bar.n < self.bar.total:
            self.bar.update(1)
            self.bar.set_postfix_str(f"{node_id}: {status.value}")

    async def run_finished(self, snapshot):
        self.bar.close()


def list_nodes(args):
    """List all available node types"""
    registry = get_registry()

    print_section("Available Node Types")

    # Group by category
    categories = {}
    for node_type in registry.list_node_types():
        metadata = registry.get_node_metadata(node_type)
        category = metadata.get("category", "other")
        categories.setdefault(category, []).append((node_type.value, metadata))

    for category in sorted(categories.keys()):
        print(f"\n{category.upper()}:")
        for type_tag, metadata in sorted(categories[category]):
            description = metadata.get("description", "")
            print(f"  {type_tag:20} - {description}")


def validate_workflow(args):
    """Validate a workflow file"""
    workflow_path = Path(args.workflow)

    if not workflow_path.exists():
        print(f"Error: Workflow file not found: {workflow_path}", file=sys.stderr)
        sys.exit(1)

    serializer = WorkflowSerializer()
    try:
        workflow_data = load_json(workflow_path)
    except ValueError as e:
        print(f"Error: Invalid JSON in {workflow_path}: {e}", file=sys.stderr)
        sys.exit(1)

    print(f"Validating workflow: {workflow_path.name}")
    print("-" * 60)

    errors = serializer.validate_workflow(workflow_data)
    if errors:
        print("Validation Errors:")
        for error in errors:
            print(f"  - {error}")
        sys.exit(1)

    print("✓ Workflow is valid")
    print(f"  Nodes: {len(workflow_data.get('nodes', []))}")
    print(f"  Edges: {len(workflow_data.get('edges', []))}")


def execute_workflow(args):
    """Execute a workflow from JSON file"""
    workflow_path = Path(args.workflow)

    if not workflow_path.exists():
        print(f"Error: Workflow file not found: {workflow_path}", file=sys.stderr)
        sys.exit(1)

    serializer = WorkflowSerializer()
    try:
        graph, metadata = serializer.load_workflow(workflow_path)
    except (GraphError, KeyError, ValueError) as e:
        print(f"Error: Could not load workflow: {e}", file=sys.stderr)
        sys.exit(1)

    if not len(graph):
        print("Error: No nodes found in workflow", file=sys.stderr)
        sys.exit(1)

    print(f"Executing workflow: {workflow_path.name}")
    print(f"Nodes: {len(graph)}, Edges: {len(graph.edges)}")
    print("-" * 60)

    executor = WorkflowExecutor(
        graph,
        sink=ProgressSink(len(graph)),
        pacing_delay=args.pacing,
        max_workers=args.max_workers,
    )
    result = asyncio.run(executor.run())

    print_section("Execution Results")
    print(f"Status: {result.status.value}")
    print(f"Total Nodes: {result.total_nodes}")
    print(f"Completed: {result.completed_nodes}")
    print(f"Failed: {result.failed_nodes}")
    print(f"Blocked: {len(result.blocked_nodes)}")
    print(f"Execution Time: {result.execution_time:.2f}s")
    if result.success:
        print(result.summary)

    if result.error:
        print(f"\nRun error: {result.error}")

    if result.errors:
        print("\nErrors:")
        for node_id, error in result.errors.items():
            print(f"  {node_id}: {error}")

    if result.blocked_nodes:
        print("\nNever ran (upstream failed or unreachable):")
        for node_id in result.blocked_nodes:
            print(f"  {node_id}")

    if args.output:
        output_path = Path(args.output)
        save_json({
            **result.to_dict(),
            "workflow": serializer.serialize_workflow(graph, metadata),
        }, output_path)
        print(f"\nResults saved to: {output_path}")

    sys.exit(0 if result.success and not result.errors else 1)


def main():
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        description="Run canvas workflows from the command line",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Verbose logging')

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    # List nodes command
    subparsers.add_parser('list-nodes', help='List all available node types')

    # Execute workflow command
    execute_parser = subparsers.add_parser('execute', help='Execute a workflow')
    execute_parser.add_argument('workflow', help='Path to workflow JSON file')
    execute_parser.add_argument('--max-workers', type=int, default=None,
                                help='Maximum ready nodes executed concurrently (default: config)')
    execute_parser.add_argument('--pacing', type=float, default=0.0,
                                help='Pause in seconds after each node')
    execute_parser.add_argument('--output', help='Save execution results to file')

    # Validate workflow command
    validate_parser = subparsers.add_parser('validate', help='Validate a workflow file')
    validate_parser.add_argument('workflow', help='Path to workflow JSON file')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s"
    )

    if not args.command:
        parser.print_help()
        return

    if args.command == 'list-nodes':
        list_nodes(args)
    elif args.command == 'execute':
        execute_workflow(args)
    elif args.command == 'validate':
        validate_workflow(args)


if __name__ == '__main__':
    main()
