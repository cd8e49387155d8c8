from models.app_model import NavigationItem, NavigationStructure, Screen
from synthesis.naming import first_segment, infer_icon, to_display_name

SIDEBAR_THRESHOLD = 5


def derive_navigation(screens: list[Screen]) -> NavigationStructure:
    """
    Group finalized screens by their first path segment. A lone screen becomes
    a flat item; several screens become a parent item with one child each.
    More than SIDEBAR_THRESHOLD items switches the layout from tabs to sidebar.
    """
    groups: dict[str, list[Screen]] = {}
    for screen in screens:
        groups.setdefault(first_segment(screen.path), []).append(screen)

    items: list[NavigationItem] = []
    for segment, group in groups.items():
        if len(group) == 1:
            items.append(NavigationItem(
                label=to_display_name(segment),
                path=group[0].path,
                icon=infer_icon(segment),
            ))
        else:
            items.append(NavigationItem(
                label=to_display_name(segment),
                path=f"/{segment}",
                icon=infer_icon(segment),
                children=[NavigationItem(label=s.name, path=s.path) for s in group],
            ))

    return NavigationStructure(
        type="sidebar" if len(items) > SIDEBAR_THRESHOLD else "tabs",
        items=items,
    )
