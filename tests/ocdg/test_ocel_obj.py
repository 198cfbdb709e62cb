import unittest
from datetime import datetime

from test_setup import SetUpOCDGTest, build_log

from ocdg.objects.ocel import OCEL, Event, Object


class TestEvent(unittest.TestCase):

    def test_referenced_objects_collapses_repetitions(self):
        event = Event("e1", datetime(2023, 1, 1), "Pack", ("o1", "o2", "o1"))
        self.assertEqual(event.referenced_objects(), ("o1", "o2"))

    def test_sort_key_uses_id_on_equal_timestamps(self):
        e_b = Event("b", datetime(2023, 1, 1), "Pack")
        e_a = Event("a", datetime(2023, 1, 1), "Pack")
        self.assertLess(e_a.sort_key, e_b.sort_key)

    def test_event_is_immutable(self):
        event = Event("e1", datetime(2023, 1, 1), "Pack")
        with self.assertRaises(AttributeError):
            event.activity = "Ship"

    def test_vmap_is_read_only(self):
        event = Event("e1", datetime(2023, 1, 1), "Pack", ("o1",), {"channel": "web"})
        with self.assertRaises(TypeError):
            event.vmap["channel"] = "shop"

    def test_object_attributes_are_read_only(self):
        attributes = {"weight": 2}
        obj = Object("i1", "Item", attributes)
        attributes["weight"] = 3
        self.assertEqual(obj.attributes, {"weight": 2})
        with self.assertRaises(TypeError):
            obj.attributes["weight"] = 5


class TestOCEL(SetUpOCDGTest):

    def test_duplicate_event_raises(self):
        with self.assertRaises(ValueError):
            OCEL(events=[Event("e1", datetime(2023, 1, 1), "A"), Event("e1", datetime(2023, 1, 2), "B")])

    def test_duplicate_object_raises(self):
        with self.assertRaises(ValueError):
            OCEL(objects=[Object("o1", "Order"), Object("o1", "Item")])

    def test_sorted_events_breaks_ties_by_id(self):
        order = [event.id for event in self.ocel.sorted_events()]
        # e4 and e5 share their timestamp
        self.assertEqual(order, ["e1", "e2", "e3", "e4", "e5"])

    def test_sorted_events_returns_copy(self):
        events = self.ocel.sorted_events()
        events.clear()
        self.assertEqual(len(self.ocel.sorted_events()), 5)

    def test_referenced_object_ids_in_first_reference_order(self):
        self.assertEqual(self.ocel.referenced_object_ids(), ["o1", "i1", "i2", "o2", "i3", "s1"])

    def test_object_types_and_activities(self):
        self.assertEqual(self.ocel.object_types, ["Item", "Order", "Shipment"])
        self.assertEqual(self.ocel.activities, {"Create Order", "Pick Item", "Ship Order"})

    def test_mappings_are_read_only(self):
        with self.assertRaises(TypeError):
            self.ocel.events["e9"] = None

    def test_empty_log(self):
        log = OCEL()
        self.assertTrue(log.is_empty())
        self.assertEqual(log.referenced_object_ids(), [])
        self.assertEqual(log.object_traces().height, 0)

    def test_object_traces(self):
        traces = self.ocel.object_traces()
        # one row per participation, repeated references counted once
        self.assertEqual(traces.height, 3 + 2 + 2 + 4 + 3)
        self.assertEqual(traces.columns,
                         ["case:concept:name", "ocel:type", "concept:name", "time:timestamp", "ocel:eid", "position"])

        rows = traces.filter(traces["case:concept:name"] == "i1").to_dicts()
        self.assertEqual([row["ocel:eid"] for row in rows], ["e1", "e3", "e4"])
        self.assertEqual([row["position"] for row in rows], [0, 2, 3])
        self.assertTrue(all(row["ocel:type"] == "Item" for row in rows))

    def test_build_log_helper(self):
        log = build_log([("E1", ["A", "B"])], types={"A": "Order"})
        self.assertEqual(log.get_object("A").type, "Order")
        self.assertEqual(log.get_object("B").type, "Item")


if __name__ == '__main__':
    unittest.main()
