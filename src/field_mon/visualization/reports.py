def print_legend(snapshot):
    """Prints the active layer's legend table."""
    if not snapshot.legend:
        print("No legend data for this layer.")
        return

    print(f"{'Class':<12} | {'Coverage':<9} | {'Color':<8} | Description")
    print("-" * 60)
    for row in snapshot.legend:
        marker = "*" if row.label == snapshot.selected_class else " "
        print(f"{marker}{row.label:<11} | {row.percentage:>7}% | {row.color:<8} | {row.description}")


def print_tooltip(tooltip):
    """Prints the cross-layer classification of the hovered pixel."""
    if not tooltip:
        print("Pixel: no class in any loaded layer")
        return

    print("--- PIXEL ACROSS LAYERS ---")
    for entry in tooltip:
        print(f"{entry.layer:<14} {entry.label:<10} {entry.percentage:>3}%  {entry.description}")


def print_map_report(snapshot):
    """Prints the map state to the console."""
    print("\n=== FIELD OVERLAY REPORT ===")
    print(f"Plot:       {snapshot.plot_name or 'None'}")
    print(f"Layer:      {snapshot.active_layer} ({snapshot.phase})")
    print(f"Window:     {snapshot.window_start.isoformat()} -> {snapshot.current_end_date.isoformat()}"
          f"{'' if snapshot.can_page_forward else '  (latest)'}")

    if snapshot.plot_area_acres is not None:
        print(f"Area:       {snapshot.plot_area_acres:.2f} acres")
    print(f"Boundary:   {'yes' if snapshot.boundary_polygon else 'not available'}")
    print(f"Tiles:      {snapshot.tile_url or 'no raster overlay'}")

    if snapshot.field_analysis:
        fa = snapshot.field_analysis
        print(f"Field Health: {fa['overall_health']} ({fa['health_status']}), mean {fa['mean']}")

    print("\n--- LEGEND ---")
    print_legend(snapshot)

    if snapshot.selected_class:
        print(f"\nHighlighted: {snapshot.selected_class} ({len(snapshot.pixel_markers)} pixels)")

    if snapshot.tooltip is not None:
        print()
        print_tooltip(snapshot.tooltip)

    if snapshot.pest_summary:
        ps = snapshot.pest_summary
        print(f"\nPest pressure: {ps['pest_percentage']:.1f}% affected, {ps['healthy_percentage']:.1f}% healthy")

    if snapshot.status_message:
        print(f"\n⚠️  {snapshot.status_message}")
    print("============================")
