def main():
    import sys

    try:
        from packaging import version
    except Exception:
        raise ModuleNotFoundError(
                'Module packaging not found. Try pip install packaging first.'
                )

    minimum = version.parse("3.10")
    current = sys.version_info
    current_version = version.parse(f'{current.major}.{current.minor}.{current.micro}')

    print(f'current Python version is {current_version}')
    print(f'required Python version is >={minimum}')

    if current_version < minimum:
        raise TypeError(
            f'This project requires Python {minimum}. Found: Python {current_version}.'
        )
    print('>>> Python version ok.')

    if '--online' not in sys.argv[1:]:
        return

    from uuidharvest.config import API_URL
    from uuidharvest.resolver import make_session, smoke_test

    if not smoke_test(make_session(1)):
        raise SystemExit(f'Lookup service at {API_URL} is not answering.')
    print('>>> Lookup service reachable.')


if __name__ == '__main__':
    main()
