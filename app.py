#!/usr/bin/env python3
"""
Field Overlay Map - Main Application
====================================
"""

import sys
import os
import argparse

# Ensure src is in python path
sys.path.append(os.path.join(os.path.dirname(__file__), 'src'))

from field_mon.config import setup_environment
from field_mon.analysis.layer_kinds import LAYER_ORDER, GROWTH
from field_mon.gui.date_pager import BACK
from field_mon.gui.orchestrator import LayerOrchestrator
from field_mon.visualization.reports import print_map_report


def get_interactive_input():
    """Get the plot and layer interactively from user."""
    print(f"\n{'='*50}")
    print("FIELD OVERLAY MAP")
    print(f"{'='*50}\n")

    plot_name = ""
    while not plot_name:
        plot_name = input("Plot name: ").strip()

    print("\nLayers:")
    for i, kind in enumerate(LAYER_ORDER, start=1):
        print(f"  {i} = {kind}")
    layer_input = input("\nLayer [1]: ").strip()

    layer = GROWTH
    if layer_input:
        try:
            layer = LAYER_ORDER[int(layer_input) - 1]
        except (ValueError, IndexError):
            print(f"Invalid layer. Using {GROWTH}.")

    return plot_name, layer


def parse_coordinate(text):
    """Parse 'lon, lat' into a [lon, lat] list."""
    try:
        parts = text.split(",")
        return [float(parts[0].strip()), float(parts[1].strip())]
    except (ValueError, IndexError):
        raise argparse.ArgumentTypeError(f"expected 'lon, lat', got {text!r}")


def parse_arguments():
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description='Field Overlay Map')
    parser.add_argument('--plot', type=str, help='Plot name to load')
    parser.add_argument('--layer', choices=LAYER_ORDER, help='Analysis layer to show')
    parser.add_argument('--back', type=int, default=0,
                        help='Number of date pages to step back from today')
    parser.add_argument('--select', type=str,
                        help='Legend class to highlight (e.g. Healthy)')
    parser.add_argument('--hover', type=parse_coordinate,
                        help='Pixel to classify across all layers, as "lon, lat"')
    parser.add_argument('--no-map', action='store_true',
                        help='Print the report only, do not open the map window')
    return parser.parse_args()


def main():
    setup_environment()
    args = parse_arguments()

    if args.plot:
        plot_name, layer = args.plot, args.layer or GROWTH
    else:
        plot_name, layer = get_interactive_input()

    orchestrator = LayerOrchestrator()
    orchestrator.select_layer(layer)
    orchestrator.select_plot(plot_name)

    for _ in range(max(0, args.back)):
        orchestrator.page_date(BACK)

    if args.select:
        orchestrator.select_legend_class(args.select)

    if args.hover:
        orchestrator.hover_coordinate(args.hover)

    snapshot = orchestrator.snapshot()
    print_map_report(snapshot)

    if not args.no_map:
        from field_mon.gui.overlay_view import OverlayView
        print("Launching map window...")
        view = OverlayView()
        view.render(snapshot)
        view.show()

    print("Done.")


if __name__ == "__main__":
    main()
