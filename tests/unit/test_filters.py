from grove import World
from grove.filters import FilterSet, apply_condition, matches


def test_apply_condition_equality_and_predicates():
    assert apply_condition(True, True)
    assert not apply_condition(False, None)
    assert apply_condition(lambda value: value > 2, 3)
    assert not apply_condition(lambda value: value > 2, 1)
    # Classes compare by equality rather than being called.
    assert apply_condition(str, str)


def test_raising_predicate_counts_as_no_match():
    assert not apply_condition(lambda value: value > 2, "high")


def test_matches_requires_present_key():
    assert matches({"awesome": True}, {"awesome": True})
    assert not matches({"awesome": False}, {})
    assert matches({"a": 1, "b": 2}, {"b": 2})


class TestFilteredExamples:
    def test_raising_predicate_only_deselects_that_example(self, world):
        world.inclusion_filter = {"level": lambda value: value > 2}
        group = world.describe("levels")
        group.example("wordy", lambda: None, level="high")
        numeric = group.example("numeric", lambda: None, level=5)

        assert group.filtered_examples() == [numeric]
        assert group.run() is True
        assert numeric.execution_result.passed

    def test_includes_all_examples_in_an_explicitly_included_group(self, world):
        world.inclusion_filter = {"awesome": True}
        group = world.describe("does something", awesome=True)
        examples = [group.example("first"), group.example("second")]
        assert group.filtered_examples() == examples

    def test_includes_explicitly_included_examples(self, world):
        world.inclusion_filter = {"include_me": True}
        group = world.describe()
        example = group.example("does something", include_me=True)
        group.example("don't run me")
        assert group.filtered_examples() == [example]

    def test_excludes_all_examples_in_an_excluded_group(self, world):
        world.exclusion_filter = {"include_me": False}
        group = world.describe("does something", include_me=False)
        group.example("first")
        group.example("second")
        assert group.filtered_examples() == []

    def test_filters_out_excluded_examples(self, world):
        world.exclusion_filter = {"exclude_me": True}
        group = world.describe("does something")
        examples = [group.example("first", exclude_me=True), group.example("second")]
        assert group.filtered_examples() == [examples[1]]

    def test_with_no_filters_returns_all(self, world):
        group = world.describe()
        example = group.example("does something")
        assert group.filtered_examples() == [example]

    def test_with_nothing_matching_inclusion_returns_none(self, world):
        world.inclusion_filter = {"awesome": False}
        group = world.describe()
        group.example("does something")
        assert group.filtered_examples() == []

    def test_filters_are_read_at_evaluation_time(self, world):
        group = world.describe()
        example = group.example("tagged", focus=True)
        other = group.example("plain")
        assert group.filtered_examples() == [example, other]

        world.inclusion_filter = {"focus": True}
        assert group.filtered_examples() == [example]

    def test_nested_group_inherits_explicit_inclusion(self, world):
        world.inclusion_filter = {"awesome": True}
        parent = world.describe("parent", awesome=True)
        child = parent.describe("child")
        example = child.example("untagged")
        assert child.filtered_examples() == [example]

    def test_forced_inclusion_wins_over_exclusion(self, world):
        world.inclusion_filter = {"focus": True}
        world.exclusion_filter = {"slow": True}
        group = world.describe()
        forced = group.example("focused and slow", focus=True, slow=True)
        assert group.filtered_examples() == [forced]

    def test_exclusion_only_removes_matching_siblings(self, world):
        world.exclusion_filter = {"slow": True}
        group = world.describe()
        fast = group.example("fast")
        group.example("slow", slow=True)
        also_fast = group.example("also fast", slow=False)
        assert group.filtered_examples() == [fast, also_fast]

    def test_explicit_group_inclusion_covers_local_overrides(self, world):
        world.inclusion_filter = {"awesome": True}
        group = world.describe(awesome=True)
        included = group.example("inherits")
        opted_out = group.example("overrides", awesome=False)
        assert group.filtered_examples() == [included, opted_out]


def test_filter_set_without_world_selects_everything():
    from grove import ExampleGroup

    group = ExampleGroup("standalone")
    example = group.example("runs")
    assert group.filter_set() == FilterSet()
    assert group.filtered_examples() == [example]


def test_world_filter_set_is_a_snapshot():
    world = World(inclusion_filter={"a": 1})
    snapshot = world.filter_set()
    world.inclusion_filter["b"] = 2
    assert dict(snapshot.inclusion) == {"a": 1}
