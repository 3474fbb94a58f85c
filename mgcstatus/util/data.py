import typing as t


# from sqlalchemy.util.langhelpers
# from paste.deploy.converters
def asbool(obj: t.Any) -> bool:
    if isinstance(obj, str):
        obj = obj.strip().lower()
        if obj in ["true", "yes", "on", "y", "t", "1"]:
            return True
        elif obj in ["false", "no", "off", "n", "f", "0"]:
            return False
        else:
            raise ValueError("String is not true/false: %r" % obj)
    return bool(obj)


def split_namespace(ns: str) -> t.Tuple[str, str]:
    """
    Split a `<database>.<collection>` namespace at its first dot.

    Collection names may contain dots themselves, database names may not.
    """
    database, _, collection = ns.partition(".")
    return database, collection
