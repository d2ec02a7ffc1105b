import pytest

from boxbind import ConfigurationError, Container


class Logger:
    def __init__(self):
        self.handlers = []


class PrefixedLogger(Logger):
    def __init__(self, inner: Logger, prefix: str):
        super().__init__()
        self.inner = inner
        self.prefix = prefix


def test_configure_mutates_component_after_activation():
    c = Container()
    c.register(Logger)
    c.configure(Logger, lambda logger: logger.handlers.append("console"))

    assert c.get(Logger).handlers == ["console"]


def test_configure_runs_once_per_activation():
    c = Container()
    calls = []

    c.register(Logger)
    c.configure(Logger, lambda logger: calls.append(logger))

    c.get(Logger)
    c.get(Logger)
    assert len(calls) == 1


def test_configure_is_lazy():
    c = Container()
    calls = []

    c.register(Logger)
    c.configure(Logger, lambda logger: calls.append(logger))

    assert calls == []
    assert not c.is_active(Logger)


def test_configure_return_value_replaces_component():
    c = Container()
    c.register(Logger)
    c.configure(Logger, lambda logger: PrefixedLogger(logger, "app"))

    logger = c.get(Logger)
    assert isinstance(logger, PrefixedLogger)
    assert logger.prefix == "app"
    assert c.get(Logger) is logger


def test_configuration_chain_applies_in_registration_order():
    c = Container()
    seen = []

    c.register(Logger)

    def decorate(logger):
        seen.append(("decorate", type(logger)))
        return PrefixedLogger(logger, "first")

    def tag(logger):
        seen.append(("tag", type(logger)))
        logger.handlers.append("tagged")

    c.configure(Logger, decorate)
    c.configure(Logger, tag)

    logger = c.get(Logger)

    assert seen == [("decorate", Logger), ("tag", PrefixedLogger)]
    assert isinstance(logger, PrefixedLogger)
    assert logger.handlers == ["tagged"]


def test_configuration_chain_result_of_last_replacement_wins():
    c = Container()
    c.set("numbers", [1])
    c.configure("numbers", lambda numbers: [*numbers, 2])
    c.configure("numbers", lambda numbers: [*numbers, 3])

    assert c.get("numbers") == [1, 2, 3]


def test_configure_value_set_with_set():
    c = Container()
    c.set("settings", {"debug": False})
    c.configure("settings", lambda settings: settings.update(debug=True))

    assert c.get("settings") == {"debug": True}


def test_configure_injects_extra_dependencies():
    c = Container()
    c.register(Logger)
    c.set("log_level", "DEBUG")

    def add_level(logger: Logger, log_level):
        logger.handlers.append(log_level)

    c.configure(add_level)

    assert c.get(Logger).handlers == ["DEBUG"]


def test_configure_params_supply_extra_arguments():
    c = Container()
    c.register(Logger)

    def add_handlers(logger, first, second="stderr"):
        logger.handlers.extend([first, second])

    c.configure(Logger, add_handlers, ["file"])
    c.configure(Logger, add_handlers, {"first": "syslog", "second": "journal"})

    assert c.get(Logger).handlers == ["file", "stderr", "syslog", "journal"]


def test_configure_infers_name_from_type_hint():
    c = Container()
    c.register(Logger)

    def configure_logger(logger: Logger):
        logger.handlers.append("inferred")

    c.configure(configure_logger)

    assert c.get(Logger).handlers == ["inferred"]


def test_configure_infers_name_from_parameter_name():
    c = Container()
    c.set("handlers", [])
    c.configure(lambda handlers: handlers.append("stdout"))

    assert c.get("handlers") == ["stdout"]


def test_configure_without_parameters_raises():
    c = Container()
    with pytest.raises(ConfigurationError):
        c.configure(lambda: None)


def test_configure_with_only_variadic_parameters_cannot_infer_name():
    c = Container()
    with pytest.raises(ConfigurationError):
        c.configure(lambda *args: None)


def test_configure_class_without_function_raises():
    c = Container()
    with pytest.raises(ConfigurationError):
        c.configure(Logger)


def test_configurators_survive_reregistration():
    c = Container()
    c.register(Logger)
    c.configure(Logger, lambda logger: logger.handlers.append("configured"))
    first = c.get(Logger)

    c.register(Logger, Logger)
    second = c.get(Logger)

    assert second is not first
    assert second.handlers == ["configured"]


def test_configure_via_alias_applies_to_target():
    c = Container()
    c.register("logger", Logger)
    c.alias(Logger, "logger")
    c.configure(Logger, lambda logger: logger.handlers.append("via-alias"))

    assert c.get("logger").handlers == ["via-alias"]
    assert c.get(Logger) is c.get("logger")


def test_configure_may_be_declared_before_registration():
    c = Container()
    c.configure("greeting", lambda greeting: greeting.upper())
    c.set("greeting", "hello")

    assert c.get("greeting") == "HELLO"


def test_failing_configurator_leaves_component_unactivated():
    c = Container()
    attempts = []

    def fail_once(logger):
        attempts.append(logger)
        if len(attempts) == 1:
            msg = "configuration failed"
            raise RuntimeError(msg)

    c.register(Logger)
    c.configure(Logger, fail_once)

    with pytest.raises(RuntimeError):
        c.get(Logger)
    assert not c.is_active(Logger)

    logger = c.get(Logger)
    assert logger is attempts[1]


def test_configure_active_component_raises_and_leaves_it_untouched():
    c = Container()
    c.register(Logger)
    logger = c.get(Logger)

    with pytest.raises(ConfigurationError, match="already active"):
        c.configure(Logger, lambda logger: logger.handlers.append("late"))

    assert c.get(Logger) is logger
    assert logger.handlers == []


def test_configure_after_reregistration_of_active_component():
    c = Container()
    c.register(Logger)
    c.get(Logger)

    c.register(Logger)
    c.configure(Logger, lambda logger: logger.handlers.append("fresh"))

    assert c.get(Logger).handlers == ["fresh"]
