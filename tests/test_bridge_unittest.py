import unittest

from tornado import gen
from tornado.testing import AsyncTestCase, gen_test

from navdeck.bridge import MemoryRouter, RouteBridge
from navdeck.permission import RouteNames
from navdeck.scheduler import LoopScheduler, ManualScheduler
from navdeck.tabs import TabSessionManager

from nav_fixtures import ROUTE_NAMES


class TestMemoryRouter(unittest.TestCase):
    def test_push_replace_back(self):
        router = MemoryRouter('/')
        seen = []
        unsubscribe = router.subscribe(seen.append)
        router.navigate('/a')
        router.navigate('/b', replace=True)
        self.assertEqual(router.history, ['/', '/b'])
        self.assertTrue(router.back())
        self.assertFalse(router.back())
        unsubscribe()
        router.navigate('/a')
        self.assertEqual(seen, ['/a', '/b', '/'])


class TestRouteBridge(unittest.TestCase):
    def setUp(self):
        self.router = MemoryRouter('/')
        self.scheduler = ManualScheduler()
        self.tabs = TabSessionManager(RouteNames(ROUTE_NAMES), scheduler=self.scheduler)
        self.bridge = RouteBridge(self.router, self.tabs).attach()
        self.scheduler.run_pending()

    def tearDown(self):
        self.bridge.close()
        self.tabs.close()

    def test_router_changes_open_tabs(self):
        self.router.navigate('/dashboard')
        self.scheduler.run_pending()
        self.assertEqual(self.tabs.keys, ('/', '/dashboard'))
        self.assertEqual(self.tabs.active_key, '/dashboard')

    def test_out_of_band_back_navigation_activates_existing_tab(self):
        self.router.navigate('/a')
        self.router.navigate('/b')
        self.scheduler.run_pending()
        self.router.back()
        self.scheduler.run_pending()
        self.assertEqual(self.tabs.keys, ('/', '/a', '/b'))
        self.assertEqual(self.tabs.active_key, '/a')

    def test_tab_intents_reach_router_in_order(self):
        self.router.navigate('/a')
        self.router.navigate('/b')
        self.scheduler.run_pending()
        self.tabs.on_tab_select('/a')
        self.scheduler.run_pending()
        self.tabs.on_tab_close('/a')
        self.scheduler.run_pending()
        self.assertEqual(self.router.history[-2:], ['/a', '/b'])
        self.assertEqual(self.tabs.keys, ('/', '/b'))
        self.assertEqual(self.tabs.active_key, '/b')

    def test_extra_listeners_follow_tab_manager(self):
        seen = []
        self.bridge.add_listener(seen.append)
        self.router.navigate('/a')
        self.assertEqual(seen, ['/a'])

    def test_replay_current_path_on_attach(self):
        router = MemoryRouter('/dashboard')
        tabs = TabSessionManager(RouteNames(ROUTE_NAMES), scheduler=self.scheduler)
        bridge = RouteBridge(router, tabs).attach()
        self.scheduler.run_pending()
        self.assertEqual(tabs.keys, ('/', '/dashboard'))
        bridge.close()
        tabs.close()

    def test_close_detaches_both_directions(self):
        self.assertEqual(len(self.scheduler), 0)
        self.bridge.close()
        self.assertFalse(self.bridge.attached)
        self.router.navigate('/a')
        self.assertEqual(len(self.scheduler), 0)
        self.tabs.on_close_all()
        self.assertEqual(self.router.history, ['/', '/a'])


class TestLoopScheduling(AsyncTestCase):
    @gen_test
    def test_route_change_runs_after_current_callback(self):
        tabs = TabSessionManager(RouteNames(ROUTE_NAMES), scheduler=LoopScheduler(self.io_loop))
        router = MemoryRouter('/')
        bridge = RouteBridge(router, tabs).attach(replay=False)

        router.navigate('/a')
        router.navigate('/b')
        self.assertEqual(tabs.keys, ('/',))
        yield gen.moment
        yield gen.moment
        self.assertEqual(tabs.keys, ('/', '/a', '/b'))
        self.assertEqual(tabs.active_key, '/b')
        bridge.close()
        tabs.close()


if __name__ == "__main__":
    unittest.main()
