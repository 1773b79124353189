import unittest

from litewire import Container, Token, injectable


class TestSingletonMemoization(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container("App")

    def test_get_constructor_returns_same_instance(self):
        token = Token("service")

        @injectable("App")
        class Service: ...

        self.cont.register(token, Service)
        a1 = self.cont.get(token)
        a2 = self.cont.get(token)
        assert isinstance(a1, Service)
        assert a2 is a1, "constructor registrations should be resolved once"

    def test_resolve_directly_returns_new_instances(self):
        @injectable("App")
        class Service: ...

        a1 = self.cont.resolve(Service)
        a2 = self.cont.resolve(Service)
        assert a2 is not a1, "resolve does not memoize; get does"

    def test_get_instance_is_always_the_registered_object(self):
        token = Token("instance")

        class A: ...

        inst = A()
        self.cont.register(token, inst)
        assert self.cont.get(token) is inst
        assert self.cont.get(token) is inst

    def test_shared_dependency_is_injected_once(self):
        clock_token = Token("clock")
        first_token = Token("first")
        second_token = Token("second")
        built = []

        def make_clock(_):
            built.append(1)
            return object()

        @injectable("App", clock_token)
        class First:
            def __init__(self, clock):
                self.clock = clock

        @injectable("App", clock_token)
        class Second:
            def __init__(self, clock):
                self.clock = clock

        self.cont.register(clock_token, make_clock)
        self.cont.register(first_token, First)
        self.cont.register(second_token, Second)

        first = self.cont.get(first_token)
        second = self.cont.get(second_token)

        assert first.clock is second.clock
        assert len(built) == 1

    def test_unregister_forgets_resolved_instance(self):
        token = Token("service")

        @injectable("App")
        class Service: ...

        self.cont.register(token, Service)
        before = self.cont.get(token)

        self.cont.unregister(token)
        self.cont.register(token, Service)
        after = self.cont.get(token)

        assert after is not before
