from __future__ import annotations

from tests.support.api_harness import ApiIntegrationTestCase
from tests.support.fixtures import build_chain_payload, build_task_payload


class DependencyValidationApiTests(ApiIntegrationTestCase):
    def test_forward_edge_is_valid(self) -> None:
        status_code, body = self.post_json(
            "/graph/dependencies/validate",
            {"tasks": build_chain_payload(3), "from_task_id": 3, "to_task_id": 1},
        )
        self.assertEqual(status_code, 200)
        self.assertEqual(body, {"valid": True, "code": None, "reason": None})

    def test_dependency_graph_must_remain_acyclic(self) -> None:
        status_code, body = self.post_json(
            "/graph/dependencies/validate",
            {"tasks": build_chain_payload(3), "from_task_id": 1, "to_task_id": 3},
        )
        self.assertEqual(status_code, 200)
        self.assertFalse(body["valid"])
        self.assertEqual(body["code"], "CIRCULAR")
        self.assertEqual(body["reason"], "Adding this dependency would create a circular dependency")

    def test_self_and_duplicate_edges_are_rejected(self) -> None:
        tasks = build_chain_payload(2)

        _, self_body = self.post_json(
            "/graph/dependencies/validate",
            {"tasks": tasks, "from_task_id": 2, "to_task_id": 2},
        )
        _, duplicate_body = self.post_json(
            "/graph/dependencies/validate",
            {"tasks": tasks, "from_task_id": 2, "to_task_id": 1},
        )

        self.assertEqual(self_body["code"], "SELF_DEPENDENCY")
        self.assertEqual(duplicate_body["code"], "DUPLICATE")

    def test_duplicate_task_ids_fail_validation(self) -> None:
        status_code, body = self.post_json(
            "/graph/dependencies/validate",
            {
                "tasks": [build_task_payload(1), build_task_payload(1)],
                "from_task_id": 1,
                "to_task_id": 2,
            },
        )
        self.assertEqual(status_code, 422)
        self.assertEqual(body["error"]["code"], "validation_error")

    def test_non_integer_dependencies_fail_validation(self) -> None:
        status_code, body = self.post_json(
            "/graph/cycles",
            {"tasks": [build_task_payload(1, dependencies=["task-a"])]},
        )
        self.assertEqual(status_code, 422)
        self.assertIn("issues", body["error"]["details"])


class GraphQueryApiTests(ApiIntegrationTestCase):
    def test_cycles_are_listed(self) -> None:
        status_code, body = self.post_json(
            "/graph/cycles",
            {
                "tasks": [
                    build_task_payload(1, dependencies=[2]),
                    build_task_payload(2, dependencies=[1]),
                ]
            },
        )
        self.assertEqual(status_code, 200)
        self.assertTrue(body["has_cycle"])
        self.assertEqual(len(body["cycles"]), 1)
        self.assertIn("(ID: 1)", body["cycles"][0])
        self.assertIn("(ID: 2)", body["cycles"][0])

    def test_blocked_status(self) -> None:
        tasks = [
            build_task_payload(1, status="done"),
            build_task_payload(2, status="in_progress"),
            build_task_payload(3, dependencies=[1, 2]),
        ]

        status_code, body = self.post_json("/graph/tasks/3/blocked", {"tasks": tasks})

        self.assertEqual(status_code, 200)
        self.assertEqual(body, {"task_id": 3, "blocked": True, "blocking_dependency_ids": [2]})

    def test_unknown_task_is_not_found(self) -> None:
        status_code, body = self.post_json("/graph/tasks/42/blocked", {"tasks": build_chain_payload(2)})
        self.assertEqual(status_code, 404)
        self.assertEqual(body["error"]["code"], "not_found")
        self.assertEqual(body["error"]["details"], {"resource": "task", "id": 42})

    def test_dependents_and_affected_on_delete(self) -> None:
        tasks = [
            build_task_payload(1),
            build_task_payload(2, dependencies=[1]),
            build_task_payload(3, dependencies=[1]),
            build_task_payload(4, dependencies=[2]),
        ]

        dependents_status, dependents = self.post_json("/graph/tasks/1/dependents", {"tasks": tasks})
        affected_status, affected = self.post_json("/graph/tasks/1/affected-on-delete", {"tasks": tasks})

        self.assertEqual(dependents_status, 200)
        self.assertEqual(affected_status, 200)
        self.assertEqual([task["id"] for task in dependents], [2, 3])
        self.assertEqual(affected, dependents)

    def test_topological_order(self) -> None:
        status_code, body = self.post_json("/graph/topological-order", {"tasks": build_chain_payload(3)})
        self.assertEqual(status_code, 200)
        self.assertEqual(body, {"order": [1, 2, 3], "cycles": [], "is_acyclic": True})

    def test_topological_order_reports_cycles(self) -> None:
        status_code, body = self.post_json(
            "/graph/topological-order",
            {
                "tasks": [
                    build_task_payload(1, dependencies=[2]),
                    build_task_payload(2, dependencies=[1]),
                ]
            },
        )
        self.assertEqual(status_code, 200)
        self.assertEqual(body["order"], [])
        self.assertFalse(body["is_acyclic"])

    def test_critical_path(self) -> None:
        tasks = [
            build_task_payload(1, estimated_duration_minutes=10),
            build_task_payload(2, dependencies=[1], estimated_duration_minutes=5),
            build_task_payload(3, dependencies=[2], estimated_duration_minutes=5),
            build_task_payload(4, dependencies=[1], estimated_duration_minutes=120),
        ]

        _, unweighted = self.post_json("/graph/critical-path", {"tasks": tasks})
        _, weighted = self.post_json("/graph/critical-path", {"tasks": tasks, "weight_by_duration": True})

        self.assertEqual(unweighted, {"task_ids": [1, 2, 3], "length": 3, "weight_by_duration": False})
        self.assertEqual(weighted, {"task_ids": [1, 4], "length": 130, "weight_by_duration": True})

    def test_analysis(self) -> None:
        tasks = [
            build_task_payload(1, status="done"),
            build_task_payload(2, dependencies=[1]),
            build_task_payload(3, dependencies=[2, 7]),
        ]

        status_code, body = self.post_json("/graph/analysis", {"tasks": tasks})

        self.assertEqual(status_code, 200)
        self.assertEqual(body["task_count"], 3)
        self.assertEqual(body["topological_order"], [1, 2, 3])
        self.assertEqual(body["critical_path"]["task_ids"], [1, 2, 3])
        self.assertEqual(body["blocked_task_ids"], [3])
        self.assertEqual(body["missing_dependencies"], {"3": [7]})
