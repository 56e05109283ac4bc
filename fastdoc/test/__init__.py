"""FastDoc 을 사용하는 애플리케이션의 테스트를 돕는 Fake 구현체들."""
