"""Tests for the assignee reconciler: the pure add/remove diff."""

from assignees_api.services.reconciler import AssigneeDelta, reconcile


class TestReconcile:
    def test_replaces_one_user(self) -> None:
        delta = reconcile({7, 9}, {9, 12})
        assert delta.to_add == (12,)
        assert delta.to_remove == (7,)
        assert delta.remove_all is False

    def test_empty_desired_removes_everyone(self) -> None:
        delta = reconcile({1, 2, 3}, set())
        assert delta.to_remove == (1, 2, 3)
        assert delta.to_add == ()
        assert delta.remove_all is True

    def test_both_empty_is_a_no_op(self) -> None:
        delta = reconcile(set(), set())
        assert delta == AssigneeDelta()
        assert delta.is_empty

    def test_identical_sets_produce_no_changes(self) -> None:
        delta = reconcile({4, 5}, {5, 4})
        assert delta.is_empty
        assert delta.remove_all is False

    def test_from_empty_adds_everyone(self) -> None:
        delta = reconcile(set(), {3, 1, 2})
        assert delta.to_add == (1, 2, 3)
        assert delta.to_remove == ()

    def test_duplicates_in_desired_collapse(self) -> None:
        delta = reconcile([1], [2, 2, 1, 2])
        assert delta.to_add == (2,)
        assert delta.to_remove == ()

    def test_output_is_sorted_by_user_id(self) -> None:
        delta = reconcile({50, 3, 20}, {99, 1, 42})
        assert delta.to_add == (1, 42, 99)
        assert delta.to_remove == (3, 20, 50)

    def test_shared_members_are_left_alone(self) -> None:
        delta = reconcile({1, 2, 3}, {2, 3, 4})
        assert 2 not in delta.to_add + delta.to_remove
        assert 3 not in delta.to_add + delta.to_remove
