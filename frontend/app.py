import requests
import streamlit as st

from chat_client import ChatServiceError, send_chat

st.set_page_config(page_title="💬 DeepSeek 채팅", layout="centered")
st.title("💬 DeepSeek 채팅 (베타)")

# CSS (가로형 알럿)
st.markdown("""
<style>
.alert-inline{
  display:flex; align-items:center; gap:10px;
  padding:10px 12px; border-radius:8px;
  background:#fff2f2; border:1px solid #ffd9d9;
  color:#b00020; font-size:14px;
}
.alert-inline .icon{font-size:16px; line-height:1;}
</style>
""", unsafe_allow_html=True)

# 역할 프리셋 (system 프롬프트로 전달)
PERSONAS = {
    "기본 도우미": "You are a helpful assistant.",
    "번역가": "You are a professional translator. Translate the user's text between Korean and English.",
    "코드 리뷰어": "You are a senior Python reviewer. Point out bugs first, then style issues.",
    "직접 입력": "",
}

# 세션 초기화: 대화 기록은 브라우저 세션에만 보관(프록시는 상태 없음)
if "history" not in st.session_state: st.session_state.history = []
if "last_error" not in st.session_state: st.session_state.last_error = None

with st.sidebar:
    persona = st.selectbox("AI 역할", list(PERSONAS.keys()))
    if persona == "직접 입력":
        system_prompt = st.text_area("system 프롬프트", value="", height=120)
    else:
        system_prompt = PERSONAS[persona]
        st.caption(system_prompt)
    if st.button("대화 지우기"):
        st.session_state.history = []
        st.session_state.last_error = None

for m in st.session_state.history:
    with st.chat_message(m["role"]):
        st.markdown(m["content"])

if st.session_state.last_error:
    st.markdown(f"""<div class="alert-inline"><span class="icon">❌</span>
    <span>{st.session_state['last_error']}</span></div>""", unsafe_allow_html=True)

prompt = st.chat_input("메시지를 입력하세요")
if prompt:
    st.session_state.history.append({"role": "user", "content": prompt})
    with st.chat_message("user"):
        st.markdown(prompt)
    with st.chat_message("assistant"):
        with st.spinner("생각 중..."):
            try:
                reply = send_chat(st.session_state.history, system_prompt)
                st.session_state.history.append({"role": "assistant", "content": reply})
                st.session_state.last_error = None
                st.markdown(reply)
            except (ChatServiceError, requests.RequestException) as e:
                # 실패한 질문은 기록에서 빼서 다시 보낼 수 있게
                st.session_state.history.pop()
                st.session_state.last_error = str(e)
                st.rerun()
