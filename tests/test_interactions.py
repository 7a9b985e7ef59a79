"""Unit tests for navigation and interaction controllers."""

from academic_site.interactions import (
    MENU_LINK, NAVIGATE, NAVBAR_BG_DEFAULT, NAVBAR_BG_SCROLLED, SCROLL, TOGGLE_MENU,
    Dispatcher, KeyEvent, MobileMenu, Navbar, NavigationController, Router,
    key_action, navbar_background,
)
from academic_site.page import Page


def classes(el):
    return el.get("class", [])


class TestKeyActions:
    def test_shortcuts(self):
        assert key_action(KeyEvent("k", ctrl=True)) == "toggle-search"
        assert key_action(KeyEvent("k", meta=True)) == "toggle-search"
        assert key_action(KeyEvent("Escape")) == "close-search"
        assert key_action(KeyEvent("Escape", ctrl=True)) == "close-search"

    def test_other_keys_do_nothing(self):
        assert key_action(KeyEvent("k")) is None
        assert key_action(KeyEvent("K", ctrl=True)) is None
        assert key_action(KeyEvent("K", meta=True)) is None
        assert key_action(KeyEvent("j", ctrl=True)) is None


class TestDispatcher:
    def test_dispatch_runs_every_handler(self):
        seen = []
        dispatcher = Dispatcher()
        dispatcher.register("ping", lambda x: seen.append(("a", x)))
        dispatcher.register("ping", lambda x: seen.append(("b", x)))
        assert dispatcher.dispatch("ping", 1) == 2
        assert seen == [("a", 1), ("b", 1)]

    def test_unknown_action(self):
        assert Dispatcher().dispatch("nothing") == 0
        assert Dispatcher().key(KeyEvent("x")) is None


class TestRouter:
    def test_known_sections(self):
        router = Router()
        assert router.navigate("about") == "index.html"
        assert router.navigate("teaching") == "teaching.html"
        assert router.location == "teaching.html"

    def test_unknown_section_is_noop(self):
        router = Router()
        router.navigate("projects")
        assert router.navigate("blog") is None
        assert router.location == "projects.html"


class TestNavbar:
    def test_threshold(self):
        assert navbar_background(0) == NAVBAR_BG_DEFAULT
        assert navbar_background(100) == NAVBAR_BG_DEFAULT
        assert navbar_background(101) == NAVBAR_BG_SCROLLED

    def test_every_scroll_rewrites_background(self, page):
        navbar = Navbar(page)
        el = page.select_one(".navbar")
        navbar.on_scroll(150)
        assert page.style_of(el)["background"] == NAVBAR_BG_SCROLLED
        navbar.on_scroll(150)
        assert page.style_of(el)["background"] == NAVBAR_BG_SCROLLED
        navbar.on_scroll(20)
        assert page.style_of(el)["background"] == NAVBAR_BG_DEFAULT

    def test_missing_navbar(self):
        assert Navbar(Page("<body></body>")).on_scroll(500) == NAVBAR_BG_SCROLLED


class TestMobileMenu:
    def test_toggle_flips_both(self, page):
        menu = MobileMenu(page)
        menu.toggle()
        assert menu.open
        assert "active" in classes(page.select_one(".nav-menu"))
        assert "active" in classes(page.select_one(".nav-toggle"))
        menu.toggle()
        assert not menu.open
        assert "active" not in classes(page.select_one(".nav-menu"))
        assert "active" not in classes(page.select_one(".nav-toggle"))

    def test_link_click_only_closes(self, page):
        menu = MobileMenu(page)
        menu.toggle()
        menu.link_clicked()
        assert not menu.open
        menu.link_clicked()
        assert not menu.open
        assert "active" not in classes(page.select_one(".nav-menu"))

    def test_unavailable_without_elements(self):
        menu = MobileMenu(Page("<body><ul class='nav-menu'></ul></body>"))
        assert not menu.available
        menu.toggle()
        assert not menu.open


class TestNavigationController:
    def test_wire_registers_actions(self, page):
        dispatcher = Dispatcher()
        controller = NavigationController(page)
        controller.wire(dispatcher)

        dispatcher.dispatch(TOGGLE_MENU)
        assert controller.menu.open
        dispatcher.dispatch(MENU_LINK)
        assert not controller.menu.open
        dispatcher.dispatch(SCROLL, 300)
        assert page.style_of(page.select_one(".navbar"))["background"] == NAVBAR_BG_SCROLLED
        dispatcher.dispatch(NAVIGATE, "contact")
        assert controller.router.location == "contact.html"

    def test_menu_actions_skipped_without_menu(self):
        dispatcher = Dispatcher()
        NavigationController(Page("<body></body>")).wire(dispatcher)
        assert dispatcher.handlers(TOGGLE_MENU) == []
        assert len(dispatcher.handlers(SCROLL)) == 1
