"""
Object/Group Accumulator
Tracks which object and groups the polygons of an OBJ file belong to
"""

import logging
import re

from obj_errors import ExpectedName

logger = logging.getLogger(__name__)

_NAME_RE = re.compile(r'[A-Za-z0-9._]+')


def name_is_valid(name):
    """Determine whether a name (of either an object or a group) is valid"""
    return _NAME_RE.fullmatch(name) is not None


class GroupAccumulator:
    """
    Collects polygon ranges into objects and groups during a parse

    Polygons are (start, end) ranges into the parser's vertex table. The
    accumulator only ever sees those ranges, so it can be driven directly
    without any line tokenization.

    Attributes:
        objects: Finished objects, mapping object name to a mapping of
                 group name to a list of polygon ranges
        current_object_name: Name given by the last 'o' directive (None
                             before the first one)
        current_groups: Groups of the object being built
        default_group_polygons: Polygons of the current object that were
                                assigned to no named group
        selected_group_names: Groups targeted by the last 'g' directive
    """

    def __init__(self):
        self.objects = {}
        self.current_object_name = None
        self.current_groups = {}
        self.default_group_polygons = []
        self.selected_group_names = []

    def add_polygon(self, polygon):
        """Assign a finished polygon range to the selected groups"""
        if not self.selected_group_names:
            self.default_group_polygons.append(polygon)
            return

        for name in self.selected_group_names:
            self.current_groups.setdefault(name, []).append(polygon)

    def select_groups(self, names):
        """
        Handle a 'g' directive

        Invalid names are dropped silently. Duplicates are kept, so a
        polygon is added once per occurrence of a name.

        Args:
            names: Group name tokens following the directive

        Returns:
            list: The names that were selected
        """
        selected = []
        for name in names:
            if not name_is_valid(name):
                logger.debug("Ignoring invalid group name %r", name)
                continue
            self.current_groups.setdefault(name, [])
            selected.append(name)

        self.selected_group_names = selected
        return selected

    def begin_object(self, names, line):
        """
        Handle an 'o' directive

        The object being built is flushed before the new name is checked,
        so a failing directive still closes the previous object.

        Args:
            names: Tokens following the directive; only the first is used
            line: 1-based line number of the directive

        Raises:
            ExpectedName: If no valid name follows the directive
        """
        self.flush()

        if not names or not name_is_valid(names[0]):
            raise ExpectedName(line)
        self.current_object_name = names[0]

    def flush(self):
        """Move the object being built into `objects` and start a new one"""
        groups = self.current_groups
        if self.default_group_polygons:
            groups[''] = self.default_group_polygons
        self.selected_group_names = []

        if groups:
            name = self.current_object_name or ''
            if name in self.objects:
                logger.debug("Object %r redefined, replacing earlier definition", name)
            self.objects[name] = groups
            logger.debug("Finished object %r with %d group(s)", name, len(groups))

        self.current_groups = {}
        self.default_group_polygons = []

    def finish(self):
        """
        Flush the last object and return every finished object

        Returns:
            dict: object name -> {group name -> tuple of (start, end) ranges}
        """
        self.flush()
        return {
            object_name: {
                group_name: tuple(polygons)
                for group_name, polygons in groups.items()
            }
            for object_name, groups in self.objects.items()
        }
